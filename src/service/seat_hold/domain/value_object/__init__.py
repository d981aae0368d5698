from src.service.seat_hold.domain.value_object.countdown_state import CountdownState
from src.service.seat_hold.domain.value_object.seat_hold_state import SeatHoldState

__all__ = ['CountdownState', 'SeatHoldState']
