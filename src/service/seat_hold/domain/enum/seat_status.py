from enum import StrEnum


class SeatStatus(StrEnum):
    AVAILABLE = 'AVAILABLE'
    BOOKED = 'BOOKED'
    HELD = 'HELD'
    BLOCKED = 'BLOCKED'
    SELECTED = 'SELECTED'
