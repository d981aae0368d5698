from typing import Optional

import attrs

from src.service.seat_hold.domain.entity.hold_entity import Hold
from src.service.seat_hold.domain.enum.hold_phase import HoldPhase


@attrs.define(frozen=True)
class SeatHoldState:
    phase: HoldPhase
    hold: Optional[Hold] = None
    is_holding: bool = False
    is_releasing: bool = False

    @property
    def hold_id(self) -> Optional[str]:
        return self.hold.hold_id if self.hold else None

    @property
    def is_expired(self) -> bool:
        return self.phase == HoldPhase.EXPIRED
