from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from recovery_service.domain.ports.notifier import NotificationDispatcherPort

logger = logging.getLogger("recovery_service.infrastructure.notifications.dispatcher")


@dataclass(frozen=True)
class RetryPolicy:
    base: float = 1  # base delay (seconds)
    max_delay: float = 30  # cap (seconds)

    def compute_delay(self, attempts: int) -> float:
        # attempts is the number of attempts already made
        delay = self.base * (2**attempts)
        return delay if delay < self.max_delay else self.max_delay


class BackgroundDispatcher(NotificationDispatcherPort):
    """
    Runs notification sends as detached asyncio tasks.

    `submit` never awaits delivery. Each task retries with exponential
    backoff and ends in a log line; nothing is reported back to the caller.
    """

    def __init__(
        self,
        *,
        max_attempts: int = 3,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.max_attempts = max_attempts
        self.retry_policy = retry_policy or RetryPolicy()
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, send: Callable[[], Awaitable[None]], *, label: str) -> None:
        task = asyncio.get_running_loop().create_task(self._deliver(send, label))
        # The loop only keeps weak references to tasks.
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _deliver(self, send: Callable[[], Awaitable[None]], label: str) -> bool:
        for attempt in range(self.max_attempts):
            try:
                await send()
            except asyncio.CancelledError:
                raise
            except Exception as e:  # noqa: BLE001
                if attempt + 1 >= self.max_attempts:
                    logger.error(
                        "notification failed",
                        extra={
                            "label": label,
                            "attempts": attempt + 1,
                            "error": str(e),
                        },
                    )
                    return False
                delay = self.retry_policy.compute_delay(attempt)
                logger.warning(
                    "notification send failed; retrying",
                    extra={
                        "label": label,
                        "attempts": attempt + 1,
                        "retry_in_s": delay,
                        "error": str(e),
                    },
                )
                await asyncio.sleep(delay)
            else:
                logger.info(
                    "notification sent",
                    extra={"label": label, "attempts": attempt + 1},
                )
                return True
        return False

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for in-flight deliveries; cancel whatever is left after `timeout`."""
        if not self._tasks:
            return
        tasks = list(self._tasks)
        _, not_done = await asyncio.wait(tasks, timeout=timeout)
        for task in not_done:
            task.cancel()
        if not_done:
            logger.warning(
                "notifications cancelled on shutdown", extra={"count": len(not_done)}
            )
            await asyncio.gather(*not_done, return_exceptions=True)
