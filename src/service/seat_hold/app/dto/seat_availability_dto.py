"""Seat availability snapshot as served by the booking backend (read-only)."""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.service.seat_hold.domain.enum.seat_status import SeatStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')


class SeatDetail(_CamelModel):
    id: str
    seat_number: str
    seat_label: Optional[str] = None
    row: Optional[int] = None
    column: Optional[str] = None
    floor: int = 1
    seat_type: Optional[str] = None
    final_price: int = 0
    status: SeatStatus
    is_selectable: bool = False
    metadata: Optional[Dict[str, Any]] = None


class SeatSummary(_CamelModel):
    total_seats: int = 0
    available_seats: int = 0
    booked_seats: int = 0
    held_seats: int = 0
    blocked_seats: int = 0


class SeatAvailability(_CamelModel):
    route_id: str
    departure_date: date
    seats: List[SeatDetail] = []
    summary: SeatSummary = SeatSummary()

    def seat_numbers_with_status(self, status: SeatStatus) -> List[str]:
        return [seat.seat_number for seat in self.seats if seat.status == status]
