"""Start anonymous session use case."""

import logfire
from pydantic import BaseModel

from authlab.application.usecase.base import BaseUseCase
from authlab.config import Settings
from authlab.domain.service import IdentityObserver, IdentityProvider, UpgradeFlow

from .status import UpgradeStatusResponse, build_status_response


class StartSessionRequest(BaseModel):
    """Start session request (no parameters)."""


class StartSessionUseCase(BaseUseCase):
    """Use case for starting a fresh anonymous session."""

    def __init__(
        self,
        provider: IdentityProvider,
        observer: IdentityObserver,
        flow: UpgradeFlow,
        settings: Settings,
    ) -> None:
        """Initialize start session use case.

        Args:
            provider: Identity provider
            observer: Identity observer
            flow: Upgrade state machine
            settings: Application settings
        """
        self.provider = provider
        self.observer = observer
        self.flow = flow
        self.settings = settings

    async def execute(self, request: StartSessionRequest) -> UpgradeStatusResponse:
        """Replace the current session with a new anonymous identity.

        The flow is re-armed first so no outcome from the previous session
        leaks into the new one.

        Raises:
            FlowBusyError: If an attempt is in flight
            ProviderFailure: If the provider refuses the anonymous sign-in
        """
        status = self.flow.cancel()
        identity = await self.provider.sign_in_anonymously()

        logfire.info("Anonymous session started", uid=identity.uid)
        return build_status_response(
            self.observer.current_identity(), status, self.settings
        )
