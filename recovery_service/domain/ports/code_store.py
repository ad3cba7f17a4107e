from typing import Optional, Protocol

from recovery_service.domain.entities import VerificationCode


class CodeStorePort(Protocol):
    """
    TTL-backed key/value store holding at most one code per key.

    Every method raises StoreUnavailable when the backend cannot be reached.
    """

    async def put(self, key: str, code: VerificationCode, ttl_seconds: int) -> None:
        """Store/replace the code with TTL=ttl_seconds. Resets the attempt count."""

    async def get(self, key: str) -> Optional[VerificationCode]:
        """Return the live code, or None if absent or past its expiry."""

    async def remove(self, key: str) -> None:
        """Delete the entry. Removing a missing key is not an error."""

    async def remove_if_equals(self, key: str, expected_value: str) -> bool:
        """Atomically delete the entry if its value matches. True only for the winner."""

    async def record_mismatch(self, key: str, max_attempts: int) -> int:
        """
        Count a failed attempt against the entry and return the new count.
        The entry is deleted once the count reaches max_attempts (0 = no cap).
        Returns 0 if the entry is absent.
        """
