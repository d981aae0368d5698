"""Application layer DTOs"""

from src.service.seat_hold.app.dto.hold_seats_result import HoldSeatsResult
from src.service.seat_hold.app.dto.seat_availability_dto import (
    SeatAvailability,
    SeatDetail,
    SeatSummary,
)

__all__ = ['HoldSeatsResult', 'SeatAvailability', 'SeatDetail', 'SeatSummary']
