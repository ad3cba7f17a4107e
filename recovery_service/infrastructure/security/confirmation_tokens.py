from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
from datetime import datetime, timezone

from recovery_service.domain.entities import ConfirmationToken
from recovery_service.domain.errors import InvalidConfirmationToken
from recovery_service.domain.ports.token_signer import TokenSignerPort


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    padding = "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode((text + padding).encode("ascii"))


class HmacTokenSigner(TokenSignerPort):
    """
    Token = base64url(claims JSON) "." base64url(HMAC-SHA256(secret, claims)).

    Claims: sub (account identifier), rid (recovery id), iat, exp as epoch
    seconds. The signature only proves the token was minted here; single use
    is enforced by the grant kept in the code store.
    """

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("token secret is required")
        self._secret = secret.encode("utf-8")

    def _sign(self, payload: bytes) -> bytes:
        return hmac.new(self._secret, payload, hashlib.sha256).digest()

    def issue(
        self,
        identifier: str,
        recovery_id: str,
        *,
        issued_at: datetime,
        expires_at: datetime,
    ) -> str:
        claims = {
            "sub": identifier,
            "rid": recovery_id,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        payload = json.dumps(claims, separators=(",", ":"), sort_keys=True).encode(
            "utf-8"
        )
        return f"{_b64encode(payload)}.{_b64encode(self._sign(payload))}"

    def verify(self, token: str, *, now: datetime) -> ConfirmationToken:
        try:
            payload_b64, signature_b64 = token.split(".")
            payload = _b64decode(payload_b64)
            signature = _b64decode(signature_b64)
        except (ValueError, binascii.Error) as e:
            raise InvalidConfirmationToken("malformed token") from e

        if not hmac.compare_digest(signature, self._sign(payload)):
            raise InvalidConfirmationToken("bad signature")

        try:
            claims = json.loads(payload)
            identifier = claims["sub"]
            recovery_id = claims["rid"]
            issued_at = datetime.fromtimestamp(int(claims["iat"]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc)
        except (ValueError, KeyError, TypeError) as e:
            raise InvalidConfirmationToken("malformed claims") from e

        if not isinstance(identifier, str) or not identifier:
            raise InvalidConfirmationToken("missing subject")
        if not isinstance(recovery_id, str) or not recovery_id:
            raise InvalidConfirmationToken("missing recovery id")
        if now >= expires_at:
            raise InvalidConfirmationToken("token expired")

        return ConfirmationToken(
            identifier=identifier,
            recovery_id=recovery_id,
            issued_at=issued_at,
            expires_at=expires_at,
        )
