"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the upgrade logic that doesn't belong to a single
    entity: observing the session, driving the link/resolve state machine.
    """

    pass
