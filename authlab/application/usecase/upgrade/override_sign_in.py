"""Override sign-in use case."""

from pydantic import BaseModel, SecretStr

from authlab.application.usecase.base import BaseUseCase
from authlab.config import Settings
from authlab.domain.model.candidate import CredentialCandidate
from authlab.domain.service import IdentityObserver, UpgradeFlow

from .status import UpgradeStatusResponse, build_status_response


class OverrideSignInRequest(BaseModel):
    """Switch to the existing account that owns the conflicting email.

    The password may be retyped; otherwise the one from the failed link
    attempt is used.
    """

    password: SecretStr | None = None


class OverrideSignInUseCase(BaseUseCase):
    """Use case for abandoning the anonymous session after a conflict."""

    def __init__(
        self, observer: IdentityObserver, flow: UpgradeFlow, settings: Settings
    ) -> None:
        self.observer = observer
        self.flow = flow
        self.settings = settings

    async def execute(self, request: OverrideSignInRequest) -> UpgradeStatusResponse:
        """Execute override sign-in.

        Discards the current anonymous identity if the sign-in succeeds.

        Args:
            request: Optional retyped password

        Returns:
            Upgrade status after the attempt

        Raises:
            FlowBusyError: If another attempt is in flight
        """
        candidate = None
        if request.password is not None:
            conflict = self.flow.conflict
            candidate = CredentialCandidate(
                email=conflict.email if conflict else "",
                password=request.password,
            )

        status = await self.flow.resolve_override_sign_in(candidate)
        return build_status_response(
            self.observer.current_identity(), status, self.settings
        )
