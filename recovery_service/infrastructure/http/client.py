from __future__ import annotations

from typing import Optional
import httpx

_client: Optional[httpx.AsyncClient] = None

USER_AGENT = "recovery-service/0.1"


async def open_http_client(timeout: float = 10.0) -> httpx.AsyncClient:
    """Create the client shared by the notification gateways (once)."""
    global _client
    if _client is None:
        _client = httpx.AsyncClient(
            timeout=timeout,
            limits=httpx.Limits(max_connections=50, max_keepalive_connections=10),
            headers={"User-Agent": USER_AGENT},
        )
    return _client


def get_http_client() -> httpx.AsyncClient:
    """Return the shared client. Must have been opened at startup."""
    if _client is None:
        raise RuntimeError(
            "HTTP client not opened yet. Call open_http_client() at startup."
        )
    return _client


async def close_http_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
