from __future__ import annotations

import hashlib

from recovery_service.application.messages import render
from recovery_service.domain.entities import (
    Account,
    Channel,
    Purpose,
    VerificationCode,
)
from recovery_service.domain.errors import NotificationFailed
from recovery_service.domain.ports.email_port import EmailPort
from recovery_service.domain.ports.notifier import CodeNotifierPort
from recovery_service.domain.ports.sms_port import SmsPort


def _idempotency_key(account: Account, code: VerificationCode, purpose: Purpose) -> str:
    # Same code, same key: gateway retries collapse into one delivery.
    # A replacement code always gets a new key, even within the same second.
    digest = hashlib.sha256(
        f"{code.value}:{code.issued_at.isoformat()}".encode("utf-8")
    ).hexdigest()[:16]
    return f"{purpose.value}:{account.username}:{digest}"


class SmsCodeNotifier(CodeNotifierPort):
    channel = Channel.SMS

    def __init__(self, sms: SmsPort) -> None:
        self._sms = sms

    async def notify(
        self, account: Account, code: VerificationCode, purpose: Purpose
    ) -> None:
        if not account.phone_number:
            raise NotificationFailed("account has no phone number")
        message = render(
            purpose, self.channel, code=code.value, ttl_seconds=code.ttl_seconds
        )
        await self._sms.send(
            to=account.phone_number,
            body=message.body,
            idempotency_key=_idempotency_key(account, code, purpose),
        )


class EmailCodeNotifier(CodeNotifierPort):
    channel = Channel.EMAIL

    def __init__(self, email: EmailPort) -> None:
        self._email = email

    async def notify(
        self, account: Account, code: VerificationCode, purpose: Purpose
    ) -> None:
        if not account.email:
            raise NotificationFailed("account has no email address")
        message = render(
            purpose,
            self.channel,
            code=code.value,
            ttl_seconds=code.ttl_seconds,
            name=account.first_name,
        )
        await self._email.send(
            to=account.email,
            subject=message.subject,
            body=message.body,
            idempotency_key=_idempotency_key(account, code, purpose),
        )


def build_notifiers(sms: SmsPort, email: EmailPort) -> dict[Channel, CodeNotifierPort]:
    notifiers: list[CodeNotifierPort] = [SmsCodeNotifier(sms), EmailCodeNotifier(email)]
    return {n.channel: n for n in notifiers}
