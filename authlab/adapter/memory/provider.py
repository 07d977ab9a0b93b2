"""In-memory identity provider.

Behaves like the hosted provider for the parts the upgrade flow relies on:
anonymous sessions, password linking, password sign-in, reset dispatch and
session-change notifications. Wired in by the test container only; the
production container always uses the Firebase adapter.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import uuid4

import logfire

from authlab.domain.error import ProviderFailure
from authlab.domain.model.identity import Identity
from authlab.domain.service.identity_provider import (
    IdentityHandler,
    IdentityProvider,
    Unsubscribe,
)
from authlab.domain.value import IdentityId

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass
class _Account:
    uid: IdentityId
    email: str
    password: str
    created_at: datetime

    def to_identity(self) -> Identity:
        return Identity(
            uid=self.uid,
            email=self.email,
            is_anonymous=False,
            created_at=self.created_at,
        )


class InMemoryIdentityProvider(IdentityProvider):
    """Identity provider keeping accounts and the session in memory."""

    def __init__(
        self,
        password_sign_in_enabled: bool = True,
        min_password_length: int = 6,
    ) -> None:
        """Initialize in-memory provider.

        Args:
            password_sign_in_enabled: Whether the Email/Password method is on
            min_password_length: Shortest accepted password
        """
        self.password_sign_in_enabled = password_sign_in_enabled
        self.min_password_length = min_password_length
        self.online = True
        self.sent_resets: list[str] = []
        self._accounts: dict[str, _Account] = {}
        self._current: Identity | None = None
        self._handlers: list[IdentityHandler] = []

    @property
    def current_user(self) -> Identity | None:
        return self._current

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def register_account(self, email: str, password: str) -> Identity:
        """Create a permanent account without touching the session.

        Args:
            email: Account email
            password: Account password

        Returns:
            The account's identity
        """
        account = _Account(
            uid=IdentityId(uuid4().hex),
            email=email.lower(),
            password=password,
            created_at=datetime.now(timezone.utc),
        )
        self._accounts[account.email] = account
        return account.to_identity()

    def start_anonymous_session(self, uid: str | None = None) -> Identity:
        """Replace the session with a fresh anonymous identity.

        Args:
            uid: Fixed uid to use instead of a random one

        Returns:
            The anonymous identity
        """
        identity = Identity(
            uid=IdentityId(uid or uuid4().hex),
            is_anonymous=True,
            created_at=datetime.now(timezone.utc),
        )
        self._set_current(identity)
        return identity

    async def sign_in_anonymously(self) -> Identity:
        self._check_online()
        return self.start_anonymous_session()

    async def link_credential(
        self, identity: Identity, email: str, password: str
    ) -> Identity:
        self._check_online()
        self._check_password_method()
        if self._current is None or self._current.uid != identity.uid:
            raise ProviderFailure(
                "auth/user-mismatch",
                "The supplied identity does not match the signed-in user.",
            )
        if not identity.is_anonymous:
            raise ProviderFailure(
                "auth/provider-already-linked",
                "User has already been linked to the given provider.",
            )
        self._check_email(email)
        if len(password) < self.min_password_length:
            raise ProviderFailure(
                "auth/weak-password",
                f"Password should be at least {self.min_password_length} characters",
            )
        if email.lower() in self._accounts:
            raise ProviderFailure(
                "auth/credential-already-in-use",
                "This credential is already associated with a different user account.",
            )

        account = _Account(
            uid=identity.uid,
            email=email.lower(),
            password=password,
            created_at=identity.created_at or datetime.now(timezone.utc),
        )
        self._accounts[account.email] = account
        linked = account.to_identity()
        self._set_current(linked)
        logfire.info("In-memory credential linked", uid=linked.uid)
        return linked

    async def sign_in(self, email: str, password: str) -> Identity:
        self._check_online()
        self._check_password_method()
        self._check_email(email)

        account = self._accounts.get(email.lower())
        if account is None:
            raise ProviderFailure(
                "auth/user-not-found",
                "There is no user record corresponding to this identifier.",
            )
        if account.password != password:
            raise ProviderFailure(
                "auth/wrong-password",
                "The password is invalid or the user does not have a password.",
            )

        identity = account.to_identity()
        self._set_current(identity)
        return identity

    async def send_password_reset(self, email: str) -> None:
        self._check_online()
        self._check_email(email)
        if email.lower() not in self._accounts:
            raise ProviderFailure(
                "auth/user-not-found",
                "There is no user record corresponding to this identifier.",
            )
        self.sent_resets.append(email.lower())

    async def subscribe_identity_changes(self, handler: IdentityHandler) -> Unsubscribe:
        self._handlers.append(handler)
        handler(self._current)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def _set_current(self, identity: Identity | None) -> None:
        self._current = identity
        for handler in list(self._handlers):
            handler(identity)

    def _check_online(self) -> None:
        if not self.online:
            raise ProviderFailure(
                "auth/network-request-failed",
                "A network error (such as timeout, interrupted connection or "
                "unreachable host) has occurred.",
            )

    def _check_password_method(self) -> None:
        if not self.password_sign_in_enabled:
            raise ProviderFailure(
                "auth/operation-not-allowed",
                "The given sign-in provider is disabled for this project.",
            )

    def _check_email(self, email: str) -> None:
        if not EMAIL_PATTERN.match(email):
            raise ProviderFailure(
                "auth/invalid-email", "The email address is badly formatted."
            )
