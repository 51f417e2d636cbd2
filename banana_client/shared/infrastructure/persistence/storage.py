"""Key-value persistence port used by the Session Store."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional


class KeyValueStorage(ABC):
    """String-keyed durable storage, the client-side equivalent of localStorage."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove a key. Removing a missing key is a no-op."""

    @abstractmethod
    def update(self, items: Mapping[str, Optional[str]]) -> None:
        """Apply several writes at once, all or nothing.

        A ``None`` value removes the key.
        """

    def close(self) -> None:
        """Release underlying resources."""


class MemoryStorage(KeyValueStorage):
    """Process-local storage. Durable only for the lifetime of the object."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def update(self, items: Mapping[str, Optional[str]]) -> None:
        staged = dict(self._data)
        for key, value in items.items():
            if value is None:
                staged.pop(key, None)
            else:
                staged[key] = value
        self._data = staged

    def snapshot(self) -> Dict[str, str]:
        return dict(self._data)
