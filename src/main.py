"""
Booking session lifespan

Wires the seat hold controller for one checkout flow: restores a hold that
survived a reload, keeps the countdown running in the background, and closes
the HTTP clients on the way out.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

import anyio

from src.platform.config.di import cleanup, container
from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.countdown_timer import ExpireCallback
from src.service.seat_hold.app.seat_hold_controller import SeatHoldController


@asynccontextmanager
async def booking_session(
    *, on_expire: Optional[ExpireCallback] = None
) -> AsyncIterator[SeatHoldController]:
    Logger.base.info('🚀 [BOOKING-SESSION] Starting up...')

    controller = container.seat_hold_controller()
    # Set before hydrate: a restored hold can expire on the spot
    if on_expire is not None:
        controller.set_on_expire(on_expire)
    restored = controller.hydrate()
    if restored:
        Logger.base.info(f'🔁 [BOOKING-SESSION] Resuming hold {restored.hold_id}')

    try:
        async with anyio.create_task_group() as tg:
            await tg.start(controller.run)
            Logger.base.info('⏱️ [BOOKING-SESSION] Countdown supervisor running')
            try:
                yield controller
            finally:
                tg.cancel_scope.cancel()
    finally:
        await cleanup()
        Logger.base.info('🛑 [BOOKING-SESSION] Shut down')
