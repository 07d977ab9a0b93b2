"""Session routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, status

from authlab.application.usecase.upgrade import StartSessionUseCase
from authlab.application.usecase.upgrade.start_session import StartSessionRequest
from authlab.application.usecase.upgrade.status import UpgradeStatusResponse
from authlab.domain.error import FlowBusyError, ProviderFailure

router = APIRouter(prefix="/session", tags=["session"], route_class=DishkaRoute)


@router.post("/anonymous", response_model=UpgradeStatusResponse)
async def start_anonymous_session(
    use_case: FromDishka[StartSessionUseCase],
) -> UpgradeStatusResponse:
    """Start a new anonymous session, replacing the current one.

    Raises:
        HTTPException: 409 if an upgrade attempt is in flight,
            502 if the provider refuses
    """
    try:
        return await use_case.execute(StartSessionRequest())
    except FlowBusyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ProviderFailure as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"code": e.code, "message": e.message},
        )
