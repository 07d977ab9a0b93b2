"""Link account use case."""

import logfire
from pydantic import BaseModel, SecretStr

from authlab.application.usecase.base import BaseUseCase
from authlab.config import Settings
from authlab.domain.model.candidate import CredentialCandidate
from authlab.domain.service import IdentityObserver, UpgradeFlow

from .status import UpgradeStatusResponse, build_status_response


class LinkAccountRequest(BaseModel):
    """Credentials to attach to the current anonymous identity."""

    email: str
    password: SecretStr


class LinkAccountUseCase(BaseUseCase):
    """Use case for upgrading the current anonymous identity."""

    def __init__(
        self, observer: IdentityObserver, flow: UpgradeFlow, settings: Settings
    ) -> None:
        """Initialize link account use case.

        Args:
            observer: Identity observer (source of the current identity)
            flow: Upgrade state machine
            settings: Application settings
        """
        self.observer = observer
        self.flow = flow
        self.settings = settings

    async def execute(self, request: LinkAccountRequest) -> UpgradeStatusResponse:
        """Execute link flow.

        Steps:
        1. Read the current identity from the observer
        2. Attempt to link the credential (guarded no-op if not applicable)
        3. Project the resulting status

        Args:
            request: Email and password to link

        Returns:
            Upgrade status after the attempt

        Raises:
            FlowBusyError: If another attempt is in flight
        """
        identity = self.observer.current_identity()
        candidate = CredentialCandidate(
            email=request.email.strip(), password=request.password
        )

        logfire.info(
            "Link requested",
            uid=identity.uid if identity else None,
            is_anonymous=identity.is_anonymous if identity else None,
        )
        status = await self.flow.attempt_link(identity, candidate)

        # Identity may have changed during the attempt
        return build_status_response(
            self.observer.current_identity(), status, self.settings
        )
