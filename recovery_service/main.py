from contextlib import asynccontextmanager
from fastapi import FastAPI

from recovery_service.application.notifiers import build_notifiers
from recovery_service.infrastructure.db.pool import close_pool, open_pool
from recovery_service.infrastructure.email.http_smtp_adapter import HttpSmtpEmailAdapter
from recovery_service.infrastructure.http.client import (
    close_http_client,
    open_http_client,
    get_http_client,
)
from recovery_service.infrastructure.notifications.dispatcher import (
    BackgroundDispatcher,
    RetryPolicy,
)
from recovery_service.infrastructure.redis_cache.pool import get_redis, close_redis
from recovery_service.infrastructure.sms.http_sms_adapter import HttpSmsAdapter
from recovery_service.logging import setup_logging
from recovery_service.presentation.api import api
from recovery_service.settings import get_settings

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    await open_pool()

    await open_http_client()

    get_redis()

    # Gateways share the one HTTP client
    email_adapter = HttpSmtpEmailAdapter(
        base_url=settings.smtp_base_url,
        client=get_http_client(),
    )
    sms_adapter = HttpSmsAdapter(
        base_url=settings.sms_base_url,
        client=get_http_client(),
    )
    dispatcher = BackgroundDispatcher(
        max_attempts=settings.notification_max_attempts,
        retry_policy=RetryPolicy(
            base=settings.notification_retry_base_seconds,
            max_delay=settings.notification_retry_max_delay_seconds,
        ),
    )
    app.state.notifiers = build_notifiers(sms_adapter, email_adapter)
    app.state.dispatcher = dispatcher

    try:
        yield
    finally:
        # shutdown
        await dispatcher.drain(timeout=5.0)
        await email_adapter.aclose()  # it won't close the shared client
        await sms_adapter.aclose()
        await close_http_client()  # closes the shared client
        await close_redis()
        await close_pool()


def create_app() -> FastAPI:
    setup_logging(settings.log_level)
    app = FastAPI(title="Password Recovery API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.include_router(api)
    return app


app = create_app()
