"""In-process key-value store."""


class InMemoryKeyValueStore:
    """Dict-backed KeyValueStore; state lives as long as the instance."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def snapshot(self) -> dict[str, str]:
        """Copy of the raw stored values, for inspection in tests and tools."""
        return dict(self._data)
