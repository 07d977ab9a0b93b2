"""Domain layer DI providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire

from authlab.config import Settings
from authlab.domain.error import ProviderFailure
from authlab.domain.service import IdentityObserver, IdentityProvider, UpgradeFlow
from authlab.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    The upgrade flow is a single logical actor for the process, so domain
    services are APP-scoped. The observer's subscription lives as long as
    the container and is released when it closes.
    """

    scope = Scope.APP

    @provide
    async def get_identity_observer(
        self, provider: IdentityProvider, settings: Settings
    ) -> AsyncIterator[IdentityObserver]:
        """Provide an activated identity observer.

        Optionally starts an anonymous session when the provider has none.
        """
        observer = IdentityObserver(provider=provider)
        async with observer.activate():
            if (
                settings.upgrade.start_anonymous_session
                and observer.current_identity() is None
            ):
                try:
                    await provider.sign_in_anonymously()
                except ProviderFailure as e:
                    logfire.warn(
                        "Could not start anonymous session",
                        code=e.code,
                        error=e.message,
                    )
            yield observer

    @provide
    def get_upgrade_flow(self, provider: IdentityProvider) -> UpgradeFlow:
        """Provide the link/resolve state machine."""
        return UpgradeFlow(provider=provider)
