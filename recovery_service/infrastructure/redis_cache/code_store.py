from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

import recovery_service.domain.services as domain_services
from recovery_service.domain.entities import VerificationCode
from recovery_service.domain.errors import StoreUnavailable
from recovery_service.domain.ports.code_store import CodeStorePort


_LUA_REMOVE_IF_EQUALS = """
-- KEYS[1]: code key
-- ARGV[1]: expected value
local cur = redis.call('HGET', KEYS[1], 'value')
if not cur then
  return 0
end
if cur ~= ARGV[1] then
  return 0
end
redis.call('DEL', KEYS[1])
return 1
"""

_LUA_RECORD_MISMATCH = """
-- KEYS[1]: code key
-- ARGV[1]: max attempts (0 = unlimited)
if redis.call('EXISTS', KEYS[1]) == 0 then
  return 0
end
local n = redis.call('HINCRBY', KEYS[1], 'attempts', 1)
local cap = tonumber(ARGV[1])
if cap > 0 and n >= cap then
  redis.call('DEL', KEYS[1])
end
return n
"""


class RedisCodeStore(CodeStorePort):
    """
    One Redis hash per key: value, issued_at, expires_at, attempts.

    Redis TTL removes entries on its own; `get` also ignores an entry whose
    expires_at has passed so a lagging expiry never revives a code.
    """

    def __init__(
        self,
        redis: Redis,
        *,
        key_prefix: str = "vc:",
        clock: Callable[[], datetime] = domain_services.utcnow,
    ) -> None:
        self._redis = redis
        self._prefix = key_prefix
        self._clock = clock

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def put(self, key: str, code: VerificationCode, ttl_seconds: int) -> None:
        redis_key = self._key(key)
        try:
            pipe = self._redis.pipeline(transaction=True)
            pipe.delete(redis_key)
            pipe.hset(
                redis_key,
                mapping={
                    "value": code.value,
                    "issued_at": code.issued_at.isoformat(),
                    "expires_at": code.expires_at.isoformat(),
                    "attempts": 0,
                },
            )
            pipe.expire(redis_key, ttl_seconds)
            await pipe.execute()
        except RedisError as e:
            raise StoreUnavailable(f"code store put failed: {e}") from e

    async def get(self, key: str) -> Optional[VerificationCode]:
        try:
            stored = await self._redis.hgetall(self._key(key))
        except RedisError as e:
            raise StoreUnavailable(f"code store get failed: {e}") from e
        if not stored or "value" not in stored:
            return None
        try:
            code = VerificationCode(
                value=stored["value"],
                issued_at=datetime.fromisoformat(stored["issued_at"]),
                expires_at=datetime.fromisoformat(stored["expires_at"]),
            )
        except (KeyError, ValueError):
            return None
        if not code.is_live(self._clock()):
            return None
        return code

    async def remove(self, key: str) -> None:
        try:
            await self._redis.delete(self._key(key))
        except RedisError as e:
            raise StoreUnavailable(f"code store remove failed: {e}") from e

    async def remove_if_equals(self, key: str, expected_value: str) -> bool:
        try:
            res = await self._redis.eval(
                _LUA_REMOVE_IF_EQUALS, 1, self._key(key), expected_value
            )
        except RedisError as e:
            raise StoreUnavailable(f"code store remove failed: {e}") from e
        return int(res) == 1

    async def record_mismatch(self, key: str, max_attempts: int) -> int:
        try:
            res = await self._redis.eval(
                _LUA_RECORD_MISMATCH, 1, self._key(key), max_attempts
            )
        except RedisError as e:
            raise StoreUnavailable(f"code store update failed: {e}") from e
        return int(res)
