from __future__ import annotations

import math
from dataclasses import dataclass
from html import escape
from string import Template

from recovery_service.domain.entities import Channel, Purpose


@dataclass(frozen=True)
class RenderedMessage:
    subject: str
    body: str


_SMS = {
    Purpose.PASSWORD_RECOVERY: Template(
        "Your password recovery code is $code. It expires in $minutes minutes."
    ),
    Purpose.IDENTITY_CONFIRMATION: Template(
        "Your identity confirmation code is $code. It expires in $minutes minutes."
    ),
}

_EMAIL_SUBJECTS = {
    Purpose.PASSWORD_RECOVERY: "Password recovery",
    Purpose.IDENTITY_CONFIRMATION: "Account verification",
}

_EMAIL_BODIES = {
    Purpose.PASSWORD_RECOVERY: Template(
        "<html><body>"
        "<p>Hello $name,</p>"
        "<p>We received a request to reset your password. "
        "Use the code below to continue:</p>"
        "<p><strong>$code</strong></p>"
        "<p>The code expires in $minutes minutes. "
        "If you did not ask for this, you can ignore this email.</p>"
        "</body></html>"
    ),
    Purpose.IDENTITY_CONFIRMATION: Template(
        "<html><body>"
        "<p>Use the code below to confirm your identity:</p>"
        "<p><strong>$code</strong></p>"
        "<p>The code expires in $minutes minutes.</p>"
        "</body></html>"
    ),
}


def render(
    purpose: Purpose,
    channel: Channel,
    *,
    code: str,
    ttl_seconds: int,
    name: str | None = None,
) -> RenderedMessage:
    minutes = max(1, math.ceil(ttl_seconds / 60))
    if channel is Channel.SMS:
        return RenderedMessage(
            subject="",
            body=_SMS[purpose].substitute(code=code, minutes=minutes),
        )
    body = _EMAIL_BODIES[purpose].substitute(
        code=escape(code), name=escape(name or "there"), minutes=minutes
    )
    return RenderedMessage(subject=_EMAIL_SUBJECTS[purpose], body=body)
