"""Account upgrade routes.

Guarded no-ops (no anonymous identity, incomplete credentials, nothing to
resolve) are not errors: they return the unchanged status.
"""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, status

from authlab.application.usecase.upgrade import (
    CancelUpgradeUseCase,
    GetUpgradeStatusUseCase,
    LinkAccountUseCase,
    OverrideSignInUseCase,
    RequestPasswordResetUseCase,
)
from authlab.application.usecase.upgrade.cancel_upgrade import CancelUpgradeRequest
from authlab.application.usecase.upgrade.get_upgrade_status import (
    GetUpgradeStatusRequest,
)
from authlab.application.usecase.upgrade.link_account import LinkAccountRequest
from authlab.application.usecase.upgrade.override_sign_in import (
    OverrideSignInRequest,
)
from authlab.application.usecase.upgrade.request_reset import (
    RequestPasswordResetRequest,
    RequestPasswordResetResponse,
)
from authlab.application.usecase.upgrade.status import UpgradeStatusResponse
from authlab.domain.error import FlowBusyError

router = APIRouter(prefix="/upgrade", tags=["upgrade"], route_class=DishkaRoute)


def _busy(e: FlowBusyError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get("", response_model=UpgradeStatusResponse)
async def get_upgrade_status(
    use_case: FromDishka[GetUpgradeStatusUseCase],
) -> UpgradeStatusResponse:
    """Current identity and upgrade flow status."""
    return await use_case.execute(GetUpgradeStatusRequest())


@router.post("/link", response_model=UpgradeStatusResponse)
async def link_account(
    request: LinkAccountRequest,
    use_case: FromDishka[LinkAccountUseCase],
) -> UpgradeStatusResponse:
    """Attach email/password to the current anonymous identity.

    Example:
        POST /upgrade/link
        {"email": "u@ex.com", "password": "Secret1!"}

    Raises:
        HTTPException: 409 if another attempt is in flight
    """
    try:
        return await use_case.execute(request)
    except FlowBusyError as e:
        raise _busy(e)


@router.post("/override", response_model=UpgradeStatusResponse)
async def override_sign_in(
    request: OverrideSignInRequest,
    use_case: FromDishka[OverrideSignInUseCase],
) -> UpgradeStatusResponse:
    """Sign in to the existing account, discarding the anonymous session.

    Raises:
        HTTPException: 409 if another attempt is in flight
    """
    try:
        return await use_case.execute(request)
    except FlowBusyError as e:
        raise _busy(e)


@router.post("/reset", response_model=RequestPasswordResetResponse)
async def request_password_reset(
    request: RequestPasswordResetRequest,
    use_case: FromDishka[RequestPasswordResetUseCase],
) -> RequestPasswordResetResponse:
    """Send a password-reset email. Does not change the upgrade status."""
    return await use_case.execute(request)


@router.post("/cancel", response_model=UpgradeStatusResponse)
async def cancel_upgrade(
    use_case: FromDishka[CancelUpgradeUseCase],
) -> UpgradeStatusResponse:
    """Return the flow to idle.

    Raises:
        HTTPException: 409 if an attempt is in flight
    """
    try:
        return await use_case.execute(CancelUpgradeRequest())
    except FlowBusyError as e:
        raise _busy(e)
