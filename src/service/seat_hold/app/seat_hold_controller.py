"""
Seat Hold Controller

Single source of truth for the client's seat reservation and its temporal
validity. All hold/release network calls go through it, and it keeps a
durable mirror of the active hold so a reload can pick it up again.

States:
    no_hold -> holding -> held -> releasing -> no_hold
                           held -> expired -> no_hold

Usage:
    controller = SeatHoldController(context=context)
    controller.hydrate()
    async with anyio.create_task_group() as tg:
        await tg.start(partial(controller.run, on_expire=show_expired_modal))
        hold = await controller.hold(request)
"""

from datetime import date, datetime
from typing import Dict, Optional, Tuple

import anyio
from anyio.abc import TaskStatus
from anyio.streams.memory import MemoryObjectReceiveStream
import attrs
from opentelemetry import trace

from src.platform.event.i_in_memory_broadcaster import IInMemoryBroadcaster
from src.platform.event.in_memory_broadcaster import InMemoryBroadcasterImpl
from src.platform.exception.exceptions import (
    CustomBaseError,
    HoldConflictError,
    ReleaseIgnorableError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.types.clock import Clock, utc_now
from src.service.seat_hold.app.countdown_timer import (
    DEFAULT_URGENT_THRESHOLD_SECONDS,
    CountdownTimer,
    ExpireCallback,
    build_countdown_state,
)
from src.service.seat_hold.app.dto.seat_availability_dto import SeatAvailability
from src.service.seat_hold.app.interface.i_hold_api_client import IHoldApiClient
from src.service.seat_hold.app.interface.i_hold_store import IHoldStore
from src.service.seat_hold.domain.entity.hold_entity import Hold, HoldRequest
from src.service.seat_hold.domain.enum.hold_phase import HoldPhase
from src.service.seat_hold.domain.value_object.countdown_state import CountdownState
from src.service.seat_hold.domain.value_object.seat_hold_state import SeatHoldState


_NO_COUNTDOWN = CountdownState(
    time_remaining_seconds=0, is_expired=False, display='00:00', is_urgent=False
)


@attrs.define
class SeatHoldContext:
    """Collaborators the controller works against, passed in explicitly."""

    api_client: IHoldApiClient
    hold_store: IHoldStore
    clock: Clock = utc_now
    tick_seconds: float = 1.0
    urgent_threshold_seconds: int = DEFAULT_URGENT_THRESHOLD_SECONDS
    default_ttl_seconds: Optional[int] = None


class SeatHoldController:
    def __init__(
        self, *, context: SeatHoldContext, on_expire: Optional[ExpireCallback] = None
    ) -> None:
        self._ctx = context
        self._on_expire = on_expire

        self._hold: Optional[Hold] = None
        # Bumped on every hold that enters memory; expiry fires once per session
        self._session = 0
        self._expired_session: Optional[int] = None
        self._pending_holds = 0
        self._pending_releases = 0

        self._availability_cache: Dict[Tuple[str, date], SeatAvailability] = {}
        self._broadcaster: IInMemoryBroadcaster[SeatHoldState] = InMemoryBroadcasterImpl(
            name='seat-hold'
        )

        # Only set while run() is active
        self._wakeup: Optional[anyio.Event] = None
        self._countdown_scope: Optional[anyio.CancelScope] = None
        self._countdown_session: Optional[int] = None

        self.tracer = trace.get_tracer(__name__)

    # ------------------------------------------------------------------ state

    @property
    def hold_id(self) -> Optional[str]:
        return self._hold.hold_id if self._hold else None

    @property
    def current_hold(self) -> Optional[Hold]:
        return self._hold

    @property
    def expires_at(self) -> Optional[datetime]:
        return self._hold.expires_at if self._hold else None

    @property
    def is_holding(self) -> bool:
        return self._pending_holds > 0

    @property
    def is_releasing(self) -> bool:
        return self._pending_releases > 0

    @property
    def is_expired(self) -> bool:
        return self._hold is not None and self._expired_session == self._session

    @property
    def phase(self) -> HoldPhase:
        if self._pending_releases:
            return HoldPhase.RELEASING
        if self._hold is None:
            return HoldPhase.HOLDING if self._pending_holds else HoldPhase.NO_HOLD
        if self._expired_session == self._session:
            return HoldPhase.EXPIRED
        return HoldPhase.HELD

    @property
    def has_active_hold(self) -> bool:
        """A hold is in memory, not expired and not being released"""
        return self.phase == HoldPhase.HELD

    @property
    def state(self) -> SeatHoldState:
        return SeatHoldState(
            phase=self.phase,
            hold=self._hold,
            is_holding=self.is_holding,
            is_releasing=self.is_releasing,
        )

    @property
    def time_remaining(self) -> int:
        return self.countdown().time_remaining_seconds

    def countdown(self) -> CountdownState:
        if self._hold is None:
            return _NO_COUNTDOWN
        return build_countdown_state(
            self._hold.seconds_remaining(self._ctx.clock()),
            urgent_threshold_seconds=self._ctx.urgent_threshold_seconds,
        )

    # ----------------------------------------------------------- observation

    def subscribe(self) -> MemoryObjectReceiveStream[SeatHoldState]:
        return self._broadcaster.subscribe()

    def unsubscribe(self, stream: MemoryObjectReceiveStream[SeatHoldState]) -> None:
        self._broadcaster.unsubscribe(stream)

    def set_on_expire(self, on_expire: Optional[ExpireCallback]) -> None:
        """Replace the expiry callback; the latest one is used when expiry fires"""
        self._on_expire = on_expire

    def _publish(self) -> None:
        self._broadcaster.publish(self.state)

    def _hold_changed(self) -> None:
        if self._countdown_scope is not None and (
            self._hold is None or self._countdown_session != self._session
        ):
            self._countdown_scope.cancel()
        if self._wakeup is not None:
            self._wakeup.set()
        self._publish()

    # ------------------------------------------------------------ operations

    @Logger.io
    def hydrate(self) -> Optional[Hold]:
        """
        Seed in-memory state from durable storage without touching the network.

        Expired or unreadable records are discarded by the store, so a stale
        hold is never resurrected. A hold already in memory always wins.
        """
        stored = self._ctx.hold_store.load(now=self._ctx.clock())
        if stored is None:
            return None
        if self._hold is not None:
            Logger.base.info(
                f'🔁 [SEAT-HOLD] Ignoring stored hold {stored.hold_id}, '
                f'{self._hold.hold_id} already active'
            )
            return self._hold

        self._session += 1
        self._hold = stored
        Logger.base.info(
            f'🔁 [SEAT-HOLD] Restored hold {stored.hold_id} '
            f'({len(stored.seats)} seats, expires {stored.expires_at.isoformat()})'
        )
        self._hold_changed()
        # Under a second left counts as expired at mount
        self.check_expiry()
        return stored

    @Logger.io
    async def hold(self, request: HoldRequest) -> Hold:
        """
        Hold seats and make the result the one active hold

        Raises:
            DomainError: Invalid request (nothing sent)
            HoldConflictError: Seats unavailable; cached availability for the
                route/date is dropped so the next read is fresh. Not retried.
            ApiError: Any other backend or transport failure
        """
        request.validate()
        if request.ttl_seconds is None and self._ctx.default_ttl_seconds:
            request = attrs.evolve(request, ttl_seconds=self._ctx.default_ttl_seconds)

        self._pending_holds += 1
        self._publish()
        succeeded = False
        try:
            with self.tracer.start_as_current_span(
                'seat_hold.hold',
                attributes={
                    'route.id': request.route_id,
                    'hold.seat_count': len(request.seats),
                },
            ):
                result = await self._ctx.api_client.hold_seats(request=request)
            succeeded = True
        except HoldConflictError as e:
            self._availability_cache.pop((request.route_id, request.departure_date), None)
            Logger.base.warning(
                f'🚫 [SEAT-HOLD] Seats unavailable on {request.route_id} '
                f'{request.departure_date}: {list(e.unavailable_seats) or list(request.seats)}'
            )
            raise
        finally:
            self._pending_holds -= 1
            if not succeeded:
                self._publish()

        hold = Hold.create(
            hold_id=result.hold_id,
            expires_at=result.expires_at,
            seats=result.seats,
            route_id=request.route_id,
            departure_date=request.departure_date,
        )
        # Last successful hold wins: overwrite, never merge
        self._ctx.hold_store.save(hold=hold)
        self._session += 1
        self._hold = hold
        self._expired_session = None

        Logger.base.info(
            f'🎫 [SEAT-HOLD] Held {list(hold.seats)} as {hold.hold_id} '
            f'until {hold.expires_at.isoformat()}'
        )
        self._hold_changed()
        return hold

    @Logger.io
    async def release(self) -> None:
        """
        Release the active hold server-side, then clean up locally.

        No-op without a hold. A backend answer of "already expired / not
        found" counts as success. Local cleanup always runs, even when the
        call fails (the failure is re-raised afterwards), unless a newer hold
        replaced the released one while the call was in flight.
        """
        hold = self._hold
        if hold is None:
            return
        session = self._session

        self._pending_releases += 1
        self._publish()
        try:
            with self.tracer.start_as_current_span(
                'seat_hold.release', attributes={'hold.id': hold.hold_id}
            ):
                await self._ctx.api_client.release_seats(
                    hold_id=hold.hold_id,
                    route_id=hold.route_id,
                    departure_date=hold.departure_date,
                    seats=hold.seats,
                )
            Logger.base.info(f'🔓 [SEAT-HOLD] Released {hold.hold_id}')
        except ReleaseIgnorableError as e:
            Logger.base.info(f'🔓 [SEAT-HOLD] {hold.hold_id} already released server-side: {e}')
        finally:
            self._pending_releases -= 1
            if self._session == session:
                self.clear_hold()
            else:
                Logger.base.info(
                    f'🔓 [SEAT-HOLD] Kept newer hold {self.hold_id} after releasing {hold.hold_id}'
                )
                self._publish()

    async def return_to_seat_selection(self) -> None:
        """Release for the "choose seats again" path; release failures are expected here"""
        try:
            await self.release()
        except CustomBaseError as e:
            Logger.base.warning(f'⚠️ [SEAT-HOLD] Release failed on return to seat selection: {e}')

    @Logger.io
    def clear_hold(self) -> None:
        """Local-only, synchronous and idempotent cleanup of storage and memory"""
        self._ctx.hold_store.clear()
        if self._hold is None and self._expired_session is None:
            return
        self._hold = None
        self._expired_session = None
        self._hold_changed()

    @Logger.io
    async def get_seat_availability(self, route_id: str, departure_date: date) -> SeatAvailability:
        key = (route_id, departure_date)
        cached = self._availability_cache.get(key)
        if cached is not None:
            return cached
        availability = await self._ctx.api_client.get_seat_availability(
            route_id=route_id, departure_date=departure_date
        )
        self._availability_cache[key] = availability
        return availability

    @Logger.io
    async def refresh_availability(self, route_id: str, departure_date: date) -> SeatAvailability:
        """Drop the cached availability for route/date and fetch it fresh. Hold state is untouched."""
        self._availability_cache.pop((route_id, departure_date), None)
        return await self.get_seat_availability(route_id, departure_date)

    # ---------------------------------------------------------------- expiry

    def check_expiry(self) -> bool:
        """
        Evaluate expiry against the clock right now. Returns True when the hold is expired.

        Stays True for the call that detected expiry even if the expiry callback
        cleared the hold.
        """
        if self._hold is not None and self._expired_session != self._session:
            if self._hold.seconds_remaining(self._ctx.clock()) <= 0:
                self._mark_expired(self._session)
                return True
        return self.is_expired

    def _mark_expired(self, session: int) -> None:
        if session != self._session or self._hold is None or self._expired_session == session:
            return
        self._expired_session = session
        self._ctx.hold_store.clear()
        Logger.base.warning(f'⌛ [SEAT-HOLD] Hold {self._hold.hold_id} expired')
        self._publish()
        if self._on_expire is not None:
            self._on_expire()

    async def run(
        self,
        *,
        on_expire: Optional[ExpireCallback] = None,
        task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED,
    ) -> None:
        """
        Drive the countdown for every held session until cancelled.

        One CountdownTimer runs per session. It is torn down as soon as the
        hold is cleared or replaced, and nothing ticks while there is no hold.
        In-flight hold/release calls do not pause it.
        """
        if on_expire is not None:
            self._on_expire = on_expire
        self._wakeup = anyio.Event()
        task_status.started()
        try:
            while True:
                if self._wakeup.is_set():
                    self._wakeup = anyio.Event()

                hold, session = self._hold, self._session
                if hold is None or self._expired_session == session:
                    await self._wakeup.wait()
                    continue

                timer = CountdownTimer(
                    expires_at=hold.expires_at,
                    clock=self._ctx.clock,
                    tick_seconds=self._ctx.tick_seconds,
                    urgent_threshold_seconds=self._ctx.urgent_threshold_seconds,
                    on_expire=lambda: self._mark_expired(session),
                )
                with anyio.CancelScope() as scope:
                    self._countdown_scope = scope
                    self._countdown_session = session
                    await timer.run()
                self._countdown_scope = None
                self._countdown_session = None
        finally:
            self._countdown_scope = None
            self._countdown_session = None
            self._wakeup = None
