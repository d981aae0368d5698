"""Seat Hold Domain Enums"""

from src.service.seat_hold.domain.enum.hold_phase import HoldPhase
from src.service.seat_hold.domain.enum.seat_status import SeatStatus

__all__ = ['HoldPhase', 'SeatStatus']
