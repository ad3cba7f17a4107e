from typing import Annotated, Mapping

from fastapi import APIRouter, Depends, HTTPException, status

from recovery_service.application.confirm_identity import (
    confirm_identity,
    request_identity_confirmation,
)
from recovery_service.domain.entities import Channel
from recovery_service.domain.errors import InvalidVerificationCode, TransientError
from recovery_service.domain.ports.code_store import CodeStorePort
from recovery_service.domain.ports.notifier import (
    CodeNotifierPort,
    NotificationDispatcherPort,
)
from recovery_service.domain.ports.unit_of_work import UnitOfWorkPort
from recovery_service.presentation.dependencies import (
    get_app_settings,
    get_code_store,
    get_dispatcher,
    get_notifiers,
    get_uow,
)
from recovery_service.presentation.routers.v1.recovery import unavailable
from recovery_service.schemas.requests import IdentityConfirmIn, IdentityRequestIn
from recovery_service.schemas.responses import AcceptedOut, OkOut
from recovery_service.settings import Settings

router = APIRouter(prefix="/identity", tags=["Identity"])


@router.post("/request", status_code=202, response_model=AcceptedOut)
async def post_request_identity_confirmation(
    body: IdentityRequestIn,
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
    code_store: Annotated[CodeStorePort, Depends(get_code_store)],
    notifiers: Annotated[Mapping[Channel, CodeNotifierPort], Depends(get_notifiers)],
    dispatcher: Annotated[NotificationDispatcherPort, Depends(get_dispatcher)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    try:
        await request_identity_confirmation(
            uow=uow,
            code_store=code_store,
            notifiers=notifiers,
            dispatcher=dispatcher,
            username=body.username,
            channel=body.channel,
            code_ttl_seconds=settings.code_ttl_seconds,
            code_length=settings.code_length,
        )
    except TransientError:
        raise unavailable()
    return AcceptedOut()


@router.post("/confirm", response_model=OkOut)
async def post_confirm_identity(
    body: IdentityConfirmIn,
    code_store: Annotated[CodeStorePort, Depends(get_code_store)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    try:
        await confirm_identity(
            code_store=code_store,
            username=body.username,
            code=body.code,
            max_attempts=settings.code_attempts,
        )
    except InvalidVerificationCode:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="invalid or expired code"
        )
    except TransientError:
        raise unavailable()
    return OkOut()
