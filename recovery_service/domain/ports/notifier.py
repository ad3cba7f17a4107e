from __future__ import annotations

from typing import Awaitable, Callable, Protocol

from recovery_service.domain.entities import (
    Account,
    Channel,
    Purpose,
    VerificationCode,
)


class CodeNotifierPort(Protocol):
    channel: Channel

    async def notify(
        self, account: Account, code: VerificationCode, purpose: Purpose
    ) -> None:
        """Render the purpose template for this channel and deliver it."""


class NotificationDispatcherPort(Protocol):
    def submit(self, send: Callable[[], Awaitable[None]], *, label: str) -> None:
        """
        Schedule `send` in the background and return immediately.
        Failures are logged, never reported to the caller.
        """
