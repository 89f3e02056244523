"""Async key-value storage contract used by the rule store."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """String-keyed async get/set storage (device-local or database-backed)."""

    async def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key was never set."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...
