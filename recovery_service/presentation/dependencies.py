from typing import Mapping

from fastapi import Request

from recovery_service.domain.entities import Channel
from recovery_service.domain.password_policy import PasswordPolicyService
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
from recovery_service.infrastructure.db.pool import get_pool
from recovery_service.infrastructure.db.uow import PgUnitOfWork
from recovery_service.infrastructure.redis_cache.code_store import RedisCodeStore
from recovery_service.infrastructure.redis_cache.pool import get_redis
from recovery_service.infrastructure.security.confirmation_tokens import (
    HmacTokenSigner,
)
from recovery_service.infrastructure.security.password import (
    hash_password,
    verify_password,
)
from recovery_service.settings import Settings, get_settings


def get_app_settings() -> Settings:
    return get_settings()


def get_uow() -> UnitOfWorkPort:
    return PgUnitOfWork(get_pool())


def get_code_store() -> CodeStorePort:
    return RedisCodeStore(get_redis())


def get_token_signer() -> TokenSignerPort:
    return HmacTokenSigner(get_settings().token_secret.get_secret_value())


def get_domain_service() -> AccountDomainServicePort:
    return PasswordPolicyService(
        hash_password,
        verify_password,
        min_length=get_settings().password_min_length,
    )


def get_notifiers(request: Request) -> Mapping[Channel, CodeNotifierPort]:
    # This is set in recovery_service.main lifespan()
    return request.app.state.notifiers


def get_dispatcher(request: Request) -> NotificationDispatcherPort:
    return request.app.state.dispatcher
