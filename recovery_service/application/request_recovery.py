from datetime import datetime
from typing import Callable, Mapping

import recovery_service.domain.services as domain_services
from recovery_service.application.verification import request_code
from recovery_service.domain.entities import Channel, Purpose
from recovery_service.domain.ports.code_store import CodeStorePort
from recovery_service.domain.ports.notifier import (
    CodeNotifierPort,
    NotificationDispatcherPort,
)
from recovery_service.domain.ports.unit_of_work import UnitOfWorkPort


async def request_recovery(
    uow: UnitOfWorkPort,
    code_store: CodeStorePort,
    notifiers: Mapping[Channel, CodeNotifierPort],
    dispatcher: NotificationDispatcherPort,
    username: str,
    channel: Channel,
    code_ttl_seconds: int = 300,
    code_length: int = 6,
    clock: Callable[[], datetime] = domain_services.utcnow,
) -> None:
    await request_code(
        uow,
        code_store,
        notifiers,
        dispatcher,
        username,
        channel,
        Purpose.PASSWORD_RECOVERY,
        code_ttl_seconds=code_ttl_seconds,
        code_length=code_length,
        clock=clock,
    )
