import json

import httpx
import pytest

from recovery_service.domain.errors import NotificationFailed
from recovery_service.infrastructure.sms.http_sms_adapter import HttpSmsAdapter


@pytest.mark.asyncio
async def test_send_posts_text_with_idempotency_key():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["json"] = json.loads(request.content.decode("utf-8"))
        seen["idem"] = request.headers.get("Idempotency-Key")
        return httpx.Response(201)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    adapter = HttpSmsAdapter("http://sms-mock:8026", client=client, send_path="messages")

    await adapter.send(to="+15550000001", body="code 483920", idempotency_key="k1")

    assert seen["url"] == "http://sms-mock:8026/messages"
    assert seen["json"] == {"to": "+15550000001", "body": "code 483920"}
    assert seen["idem"] == "k1"
    await client.aclose()


@pytest.mark.asyncio
async def test_gateway_rejection_raises_notification_failed():
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda _: httpx.Response(503, text="busy"))
    )
    adapter = HttpSmsAdapter("http://sms-mock:8026", client=client)

    with pytest.raises(NotificationFailed, match="SMS gateway responded 503: busy"):
        await adapter.send(to="+1", body="x")
    await client.aclose()


@pytest.mark.asyncio
async def test_timeout_is_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    adapter = HttpSmsAdapter("http://sms-mock:8026", client=client)

    with pytest.raises(NotificationFailed, match="SMS HTTP error:"):
        await adapter.send(to="+1", body="x")
    await client.aclose()
