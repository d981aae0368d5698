"""
https://python-dependency-injector.ets-labs.org/index.html
"""

from pathlib import Path

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.constant.path import HOLD_STATE_DIR
from src.platform.types.clock import utc_now
from src.service.payment.app.command.select_payment_method_use_case import (
    SelectPaymentMethodUseCase,
)
from src.service.payment.driven_adapter.payment_api_client_impl import PaymentApiClientImpl
from src.service.seat_hold.app.interface.i_key_value_store import IKeyValueStore
from src.service.seat_hold.app.seat_hold_controller import SeatHoldContext, SeatHoldController
from src.service.seat_hold.driven_adapter.hold_api_client_impl import HoldApiClientImpl
from src.service.seat_hold.driven_adapter.hold_store_impl import HoldStoreImpl
from src.service.seat_hold.driven_adapter.key_value_store_impl import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
)


def build_key_value_store(storage_path: str) -> IKeyValueStore:
    """Empty path -> in-memory store, otherwise a JSON file (relative paths live under HOLD_STATE_DIR)"""
    if not storage_path:
        return InMemoryKeyValueStore()
    path = Path(storage_path)
    if not path.is_absolute():
        path = HOLD_STATE_DIR / path
    return FileKeyValueStore(path=path)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    clock = providers.Object(utc_now)

    # Persistence
    key_value_store = providers.Singleton(
        build_key_value_store,
        storage_path=config_service.provided.HOLD_STORAGE_PATH,
    )
    hold_store = providers.Singleton(
        HoldStoreImpl,
        kv_store=key_value_store,
        storage_key=config_service.provided.HOLD_STORAGE_KEY,
    )

    # HTTP clients (own an httpx.AsyncClient each; close via aclose())
    hold_api_client = providers.Singleton(HoldApiClientImpl.from_settings, config_service)
    payment_api_client = providers.Singleton(PaymentApiClientImpl.from_settings, config_service)

    # Seat hold
    seat_hold_context = providers.Factory(
        SeatHoldContext,
        api_client=hold_api_client,
        hold_store=hold_store,
        clock=clock,
        tick_seconds=config_service.provided.COUNTDOWN_TICK_SECONDS,
        urgent_threshold_seconds=config_service.provided.COUNTDOWN_URGENT_THRESHOLD_SECONDS,
        default_ttl_seconds=config_service.provided.HOLD_DEFAULT_TTL_SECONDS,
    )
    seat_hold_controller = providers.Singleton(SeatHoldController, context=seat_hold_context)

    # Payment
    select_payment_method_use_case = providers.Factory(
        SelectPaymentMethodUseCase,
        payment_api_client=payment_api_client,
        hold_guard=seat_hold_controller,
        return_url=config_service.provided.PAYMENT_RETURN_URL,
    )


container = Container()


async def cleanup() -> None:
    """Close HTTP clients and drop singletons (end of a booking session / test)"""
    await container.hold_api_client().aclose()
    await container.payment_api_client().aclose()
    container.reset_singletons()
