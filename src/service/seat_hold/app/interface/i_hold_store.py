from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.service.seat_hold.domain.entity.hold_entity import Hold


class IHoldStore(ABC):
    """Single-slot persistence for the active hold."""

    @abstractmethod
    def load(self, *, now: datetime) -> Optional[Hold]:
        """
        Read the stored hold

        Args:
            now: Evaluation time for the expiry check

        Returns:
            The hold if one is stored and still active, otherwise None.
            Expired or unreadable records are purged.
        """
        pass

    @abstractmethod
    def save(self, *, hold: Hold) -> None:
        """Overwrite the slot with hold"""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Empty the slot (idempotent)"""
        pass
