from __future__ import annotations
from typing import Dict, Optional, Protocol


class KeyValueStorage(Protocol):
    """Durable string storage the stores persist into."""

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...


class MemoryKeyValueStorage:
    """
    Process-local storage. Used by tests and by STORAGE_BACKEND=memory;
    nothing survives a restart.
    """
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"value for {key!r} must be str, got {type(value).__name__}")
        self._data[key] = value

    def snapshot(self) -> Dict[str, str]:
        return dict(self._data)
