"""
Countdown presenter for seat holds.

Pure derivation from expires_at and the clock:
    remaining = max(0, floor((expires_at - now) / 1s))

The timer ticks once immediately and then every tick_seconds. When remaining
reaches 0 it stops, flags itself expired and fires the expiry callback exactly
once. It never clears the hold itself.
"""

from datetime import datetime
import math
from typing import Callable, Optional

import anyio
from anyio.abc import TaskStatus

from src.platform.logging.loguru_io import Logger
from src.platform.types.clock import Clock, utc_now
from src.service.seat_hold.domain.value_object.countdown_state import CountdownState


ExpireCallback = Callable[[], None]

DEFAULT_URGENT_THRESHOLD_SECONDS = 60


def seconds_until(expires_at: datetime, now: datetime) -> int:
    return max(0, math.floor((expires_at - now).total_seconds()))


def format_countdown(seconds: int) -> str:
    """MM:SS, zero padded. No hour rollover: holds are minutes long."""
    seconds = max(0, seconds)
    minutes, secs = divmod(seconds, 60)
    return f'{minutes:02d}:{secs:02d}'


def is_urgent(seconds: int, threshold: int = DEFAULT_URGENT_THRESHOLD_SECONDS) -> bool:
    return seconds < threshold


def build_countdown_state(
    seconds: int, *, urgent_threshold_seconds: int = DEFAULT_URGENT_THRESHOLD_SECONDS
) -> CountdownState:
    return CountdownState(
        time_remaining_seconds=seconds,
        is_expired=seconds <= 0,
        display=format_countdown(seconds),
        is_urgent=is_urgent(seconds, urgent_threshold_seconds),
    )


class CountdownTimer:
    def __init__(
        self,
        *,
        expires_at: datetime,
        clock: Clock = utc_now,
        tick_seconds: float = 1.0,
        urgent_threshold_seconds: int = DEFAULT_URGENT_THRESHOLD_SECONDS,
        on_expire: Optional[ExpireCallback] = None,
    ) -> None:
        self.expires_at = expires_at
        self._clock = clock
        self._tick_seconds = tick_seconds
        self._urgent_threshold_seconds = urgent_threshold_seconds
        self._on_expire = on_expire
        self._fired = False

    @property
    def has_fired(self) -> bool:
        return self._fired

    def set_on_expire(self, on_expire: Optional[ExpireCallback]) -> None:
        """Swap the callback without restarting the countdown"""
        self._on_expire = on_expire

    def snapshot(self) -> CountdownState:
        return build_countdown_state(
            seconds_until(self.expires_at, self._clock()),
            urgent_threshold_seconds=self._urgent_threshold_seconds,
        )

    def tick(self) -> CountdownState:
        state = self.snapshot()
        if state.is_expired and not self._fired:
            self._fired = True
            Logger.base.info(f'⌛ [COUNTDOWN] Expired (expires_at={self.expires_at.isoformat()})')
            if self._on_expire is not None:
                self._on_expire()
        return state

    async def run(
        self, *, task_status: TaskStatus[CountdownState] = anyio.TASK_STATUS_IGNORED
    ) -> CountdownState:
        state = self.tick()
        task_status.started(state)
        while not state.is_expired:
            await anyio.sleep(self._tick_seconds)
            state = self.tick()
        return state
