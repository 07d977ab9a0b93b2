"""Cancel upgrade use case."""

from pydantic import BaseModel

from authlab.application.usecase.base import BaseUseCase
from authlab.config import Settings
from authlab.domain.service import IdentityObserver, UpgradeFlow

from .status import UpgradeStatusResponse, build_status_response


class CancelUpgradeRequest(BaseModel):
    """Cancel upgrade request (no parameters)."""


class CancelUpgradeUseCase(BaseUseCase):
    """Use case for returning the upgrade flow to idle."""

    def __init__(
        self, observer: IdentityObserver, flow: UpgradeFlow, settings: Settings
    ) -> None:
        self.observer = observer
        self.flow = flow
        self.settings = settings

    async def execute(self, request: CancelUpgradeRequest) -> UpgradeStatusResponse:
        """Cancel the current attempt.

        Raises:
            FlowBusyError: If an attempt is in flight
        """
        status = self.flow.cancel()
        return build_status_response(
            self.observer.current_identity(), status, self.settings
        )
