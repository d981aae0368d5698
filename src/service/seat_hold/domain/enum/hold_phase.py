from enum import StrEnum


class HoldPhase(StrEnum):
    NO_HOLD = 'no_hold'
    HOLDING = 'holding'  # hold request in flight, no timer yet
    HELD = 'held'
    RELEASING = 'releasing'
    EXPIRED = 'expired'
