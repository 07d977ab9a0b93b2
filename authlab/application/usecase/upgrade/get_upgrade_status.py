"""Get upgrade status use case."""

from pydantic import BaseModel

from authlab.application.usecase.base import BaseUseCase
from authlab.config import Settings
from authlab.domain.service import IdentityObserver, UpgradeFlow

from .status import UpgradeStatusResponse, build_status_response


class GetUpgradeStatusRequest(BaseModel):
    """Get upgrade status request (no parameters)."""


class GetUpgradeStatusUseCase(BaseUseCase):
    """Use case for reading the current identity and flow status."""

    def __init__(
        self, observer: IdentityObserver, flow: UpgradeFlow, settings: Settings
    ) -> None:
        self.observer = observer
        self.flow = flow
        self.settings = settings

    async def execute(
        self, request: GetUpgradeStatusRequest
    ) -> UpgradeStatusResponse:
        return build_status_response(
            self.observer.current_identity(), self.flow.status(), self.settings
        )
