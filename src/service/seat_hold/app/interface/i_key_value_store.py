from abc import ABC, abstractmethod
from typing import Optional


class IKeyValueStore(ABC):
    """
    Reload-durable string key-value store.

    Synchronous on purpose: local hold cleanup must complete without yielding
    to the event loop.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove key. Must not fail when the key is absent."""
        pass
