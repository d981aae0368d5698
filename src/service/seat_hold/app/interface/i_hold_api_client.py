"""
Hold API Client Interface

Network calls against the booking backend's seat endpoints.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Sequence

from src.service.seat_hold.app.dto.hold_seats_result import HoldSeatsResult
from src.service.seat_hold.app.dto.seat_availability_dto import SeatAvailability
from src.service.seat_hold.domain.entity.hold_entity import HoldRequest


class IHoldApiClient(ABC):
    @abstractmethod
    async def hold_seats(self, *, request: HoldRequest) -> HoldSeatsResult:
        """
        Hold seats for a route/date

        Raises:
            HoldConflictError: When one or more seats are unavailable
            ApiError: Any other backend or transport failure
        """
        pass

    @abstractmethod
    async def release_seats(
        self,
        *,
        hold_id: str,
        route_id: str,
        departure_date: date,
        seats: Sequence[str],
    ) -> None:
        """
        Release a hold

        Raises:
            ReleaseIgnorableError: When the hold is already expired or unknown server-side
            ApiError: Any other backend or transport failure
        """
        pass

    @abstractmethod
    async def get_seat_availability(
        self, *, route_id: str, departure_date: date
    ) -> SeatAvailability:
        pass

    @abstractmethod
    async def aclose(self) -> None:
        """Release the underlying HTTP connection pool"""
        pass
