"""Application layer DI providers."""

from dishka import Scope, provide

from authlab.application.usecase.upgrade import (
    CancelUpgradeUseCase,
    GetUpgradeStatusUseCase,
    LinkAccountUseCase,
    OverrideSignInUseCase,
    RequestPasswordResetUseCase,
    StartSessionUseCase,
)
from authlab.config import Settings
from authlab.domain.service import IdentityObserver, IdentityProvider, UpgradeFlow
from authlab.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_start_session_use_case(
        self,
        provider: IdentityProvider,
        observer: IdentityObserver,
        flow: UpgradeFlow,
        settings: Settings,
    ) -> StartSessionUseCase:
        """Provide start session use case."""
        return StartSessionUseCase(
            provider=provider, observer=observer, flow=flow, settings=settings
        )

    @provide(scope=Scope.REQUEST)
    def get_upgrade_status_use_case(
        self, observer: IdentityObserver, flow: UpgradeFlow, settings: Settings
    ) -> GetUpgradeStatusUseCase:
        """Provide get upgrade status use case."""
        return GetUpgradeStatusUseCase(observer=observer, flow=flow, settings=settings)

    @provide(scope=Scope.REQUEST)
    def get_link_account_use_case(
        self, observer: IdentityObserver, flow: UpgradeFlow, settings: Settings
    ) -> LinkAccountUseCase:
        """Provide link account use case."""
        return LinkAccountUseCase(observer=observer, flow=flow, settings=settings)

    @provide(scope=Scope.REQUEST)
    def get_override_sign_in_use_case(
        self, observer: IdentityObserver, flow: UpgradeFlow, settings: Settings
    ) -> OverrideSignInUseCase:
        """Provide override sign-in use case."""
        return OverrideSignInUseCase(observer=observer, flow=flow, settings=settings)

    @provide(scope=Scope.REQUEST)
    def get_request_password_reset_use_case(
        self, flow: UpgradeFlow
    ) -> RequestPasswordResetUseCase:
        """Provide request password reset use case."""
        return RequestPasswordResetUseCase(flow=flow)

    @provide(scope=Scope.REQUEST)
    def get_cancel_upgrade_use_case(
        self, observer: IdentityObserver, flow: UpgradeFlow, settings: Settings
    ) -> CancelUpgradeUseCase:
        """Provide cancel upgrade use case."""
        return CancelUpgradeUseCase(observer=observer, flow=flow, settings=settings)
