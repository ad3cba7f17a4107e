from typing import Annotated, Mapping

from fastapi import APIRouter, Depends, HTTPException, status

from recovery_service.application.complete_recovery import complete_recovery
from recovery_service.application.confirm_recovery import confirm_recovery
from recovery_service.application.request_recovery import request_recovery
from recovery_service.domain.entities import Channel
from recovery_service.domain.errors import (
    AccountNotFound,
    CredentialUpdateRejected,
    InvalidConfirmationToken,
    InvalidVerificationCode,
    TransientError,
)
from recovery_service.domain.ports.account_domain_service import (
    AccountDomainServicePort,
)
from recovery_service.domain.ports.code_store import CodeStorePort
from recovery_service.domain.ports.notifier import (
    CodeNotifierPort,
    NotificationDispatcherPort,
)
from recovery_service.domain.ports.token_signer import TokenSignerPort
from recovery_service.domain.ports.unit_of_work import UnitOfWorkPort
from recovery_service.presentation.dependencies import (
    get_app_settings,
    get_code_store,
    get_dispatcher,
    get_domain_service,
    get_notifiers,
    get_token_signer,
    get_uow,
)
from recovery_service.schemas.requests import (
    RecoveryCompleteIn,
    RecoveryConfirmIn,
    RecoveryRequestIn,
)
from recovery_service.schemas.responses import AcceptedOut, ConfirmationTokenOut, OkOut
from recovery_service.settings import Settings

router = APIRouter(prefix="/recovery", tags=["Recovery"])


def unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="service temporarily unavailable",
        headers={"Retry-After": "1"},
    )


@router.post(
    "/request",
    status_code=202,
    response_model=AcceptedOut,
)
async def post_request_recovery(
    body: RecoveryRequestIn,
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
    code_store: Annotated[CodeStorePort, Depends(get_code_store)],
    notifiers: Annotated[Mapping[Channel, CodeNotifierPort], Depends(get_notifiers)],
    dispatcher: Annotated[NotificationDispatcherPort, Depends(get_dispatcher)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    try:
        await request_recovery(
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


@router.post("/confirm", response_model=ConfirmationTokenOut)
async def post_confirm_recovery(
    body: RecoveryConfirmIn,
    code_store: Annotated[CodeStorePort, Depends(get_code_store)],
    token_signer: Annotated[TokenSignerPort, Depends(get_token_signer)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    try:
        token = await confirm_recovery(
            code_store=code_store,
            token_signer=token_signer,
            username=body.username,
            code=body.code,
            max_attempts=settings.code_attempts,
            token_ttl_seconds=settings.token_ttl_seconds,
        )
    except InvalidVerificationCode:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="invalid or expired code"
        )
    except TransientError:
        raise unavailable()
    return ConfirmationTokenOut(token=token)


@router.post("/complete", response_model=OkOut)
async def post_complete_recovery(
    body: RecoveryCompleteIn,
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
    code_store: Annotated[CodeStorePort, Depends(get_code_store)],
    token_signer: Annotated[TokenSignerPort, Depends(get_token_signer)],
    domain_service: Annotated[AccountDomainServicePort, Depends(get_domain_service)],
):
    try:
        await complete_recovery(
            uow=uow,
            code_store=code_store,
            token_signer=token_signer,
            domain_service=domain_service,
            token=body.token,
            new_password=body.password,
        )
    except (InvalidConfirmationToken, AccountNotFound):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="invalid or expired token"
        )
    except CredentialUpdateRejected:
        raise HTTPException(
            status_code=422,
            detail="password rejected",
        )
    except TransientError:
        raise unavailable()
    return OkOut()
