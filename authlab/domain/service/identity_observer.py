"""Identity observer domain service."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import logfire

from authlab.domain.error import ObserverError
from authlab.domain.model.identity import Identity
from authlab.domain.service.identity_provider import IdentityProvider, Unsubscribe

from .base import Service


class IdentityObserver(Service):
    """Tracks the provider's current session identity.

    The rest of the flow reads ``current_identity()`` as the single source of
    truth for who the session belongs to. The subscription is a scoped
    resource: ``activate()`` registers exactly one subscription and releases
    it on every exit path.

    If the provider never calls back the observer stays at ``None``.
    """

    def __init__(self, provider: IdentityProvider) -> None:
        """Initialize identity observer.

        Args:
            provider: Identity provider to subscribe to
        """
        self.provider = provider
        self._identity: Identity | None = None
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    def current_identity(self) -> Identity | None:
        """Return the latest identity snapshot reported by the provider."""
        return self._identity

    @asynccontextmanager
    async def activate(self) -> AsyncIterator["IdentityObserver"]:
        """Subscribe to identity changes for the duration of the scope.

        Raises:
            ObserverError: If the observer is already active
        """
        if self._active:
            raise ObserverError("Identity observer is already active")

        # Providers may call back synchronously while subscribing
        self._active = True
        unsubscribe: Unsubscribe | None = None
        try:
            with logfire.span("identity_observer.activate"):
                unsubscribe = await self.provider.subscribe_identity_changes(
                    self._on_identity_changed
                )
                logfire.info(
                    "Identity observer subscribed",
                    has_identity=self._identity is not None,
                )
            yield self
        finally:
            self._active = False
            self._identity = None
            if unsubscribe is not None:
                unsubscribe()
                logfire.info("Identity observer unsubscribed")

    def _on_identity_changed(self, identity: Identity | None) -> None:
        if not self._active:
            # Late callback after release
            return

        previous = self._identity
        self._identity = identity
        logfire.info(
            "Identity changed",
            previous_uid=previous.uid if previous else None,
            uid=identity.uid if identity else None,
            is_anonymous=identity.is_anonymous if identity else None,
        )
