"""Request password reset use case."""

from pydantic import BaseModel

from authlab.application.usecase.base import BaseUseCase
from authlab.domain.service import UpgradeFlow


class RequestPasswordResetRequest(BaseModel):
    """Password reset request; defaults to the email being upgraded."""

    email: str | None = None


class RequestPasswordResetResponse(BaseModel):
    """Password reset dispatch result."""

    email: str
    sent: bool
    message: str
    provider_code: str | None


class RequestPasswordResetUseCase(BaseUseCase):
    """Use case for dispatching a password-reset email.

    Runs independently of the upgrade flow's main state.
    """

    def __init__(self, flow: UpgradeFlow) -> None:
        self.flow = flow

    async def execute(
        self, request: RequestPasswordResetRequest
    ) -> RequestPasswordResetResponse:
        candidate = self.flow.candidate
        email = request.email or (candidate.email if candidate else "")

        report = await self.flow.request_reset(email.strip())
        return RequestPasswordResetResponse(
            email=report.email,
            sent=report.sent,
            message=report.message,
            provider_code=report.provider_code,
        )
