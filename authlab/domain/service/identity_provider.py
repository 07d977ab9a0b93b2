"""Identity provider port.

The upgrade flow talks to the external identity provider (credential
storage, token issuance, session persistence) only through this interface.
Adapters live in ``authlab.adapter``.
"""

from collections.abc import Callable

from authlab.domain.model.identity import Identity

IdentityHandler = Callable[[Identity | None], None]
Unsubscribe = Callable[[], None]


class IdentityProvider:
    """Generic identity provider interface.

    Every failing operation raises ``ProviderFailure`` with an ``auth/*`` code.
    """

    async def link_credential(
        self, identity: Identity, email: str, password: str
    ) -> Identity:
        """Attach an email/password credential to an existing identity.

        Args:
            identity: Identity to upgrade (normally the current transient one)
            email: Email for the new credential
            password: Password for the new credential

        Returns:
            The upgraded identity
        """
        raise NotImplementedError

    async def sign_in(self, email: str, password: str) -> Identity:
        """Sign in with a password credential, replacing the current session.

        Args:
            email: Account email
            password: Account password

        Returns:
            The identity now owning the session
        """
        raise NotImplementedError

    async def send_password_reset(self, email: str) -> None:
        """Dispatch a password-reset notification.

        Args:
            email: Account email
        """
        raise NotImplementedError

    async def subscribe_identity_changes(self, handler: IdentityHandler) -> Unsubscribe:
        """Register a handler for session identity changes.

        The handler is called with the current identity once registered and
        again on every change (``None`` when signed out).

        Args:
            handler: Callback receiving the new identity

        Returns:
            Callable that removes the subscription
        """
        raise NotImplementedError

    async def sign_in_anonymously(self) -> Identity:
        """Start a transient session.

        Returns:
            The new anonymous identity
        """
        raise NotImplementedError
