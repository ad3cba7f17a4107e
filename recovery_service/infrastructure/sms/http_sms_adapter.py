from __future__ import annotations

from typing import Optional, Dict
import httpx

from recovery_service.domain.errors import NotificationFailed
from recovery_service.domain.ports.sms_port import SmsPort


class HttpSmsAdapter(SmsPort):
    """Posts text messages to an HTTP SMS gateway."""

    def __init__(
        self,
        base_url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
        send_path: str = "/sms",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._send_path = send_path if send_path.startswith("/") else f"/{send_path}"
        self._owns_client: bool = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=timeout)

    async def send(
        self,
        *,
        to: str,
        body: str,
        idempotency_key: str | None = None,
    ) -> None:
        headers: Dict[str, str] = {}
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key

        url = f"{self._base_url}{self._send_path}"

        try:
            resp = await self._client.post(
                url, json={"to": to, "body": body}, headers=headers
            )
        except httpx.HTTPError as e:
            raise NotificationFailed(f"SMS HTTP error: {e}") from e
        if not (200 <= resp.status_code < 300):
            raise NotificationFailed(
                f"SMS gateway responded {resp.status_code}: {resp.text[:200]}"
            )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
