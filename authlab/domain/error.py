"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ProviderFailure(DomainError):
    """Failure reported by the identity provider.

    Carries the provider-defined classification code (``auth/...``) and a
    human-readable message. The upgrade flow classifies these; it never
    inspects the message to decide anything.
    """

    def __init__(self, code: str, message: str = ""):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}" if message else code)


class FlowBusyError(DomainError):
    """Raised when an operation is attempted while a provider call is in flight."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"Cannot {operation} while another upgrade attempt is submitting"
        )


class ObserverError(DomainError):
    """Raised when the identity observer is activated twice."""

    pass
