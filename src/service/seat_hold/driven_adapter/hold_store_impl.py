from datetime import datetime
from typing import Optional

import orjson

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.interface.i_hold_store import IHoldStore
from src.service.seat_hold.app.interface.i_key_value_store import IKeyValueStore
from src.service.seat_hold.domain.entity.hold_entity import Hold


class HoldStoreImpl(IHoldStore):
    """
    Persists the single active hold under one fixed key.

    There is no multi-hold support: save() overwrites whatever was stored.
    """

    def __init__(self, *, kv_store: IKeyValueStore, storage_key: str) -> None:
        self._kv_store = kv_store
        self._storage_key = storage_key

    @Logger.io
    def load(self, *, now: datetime) -> Optional[Hold]:
        raw = self._kv_store.get(self._storage_key)
        if raw is None:
            return None

        try:
            record = orjson.loads(raw)
            hold = Hold.from_record(record)
        except (orjson.JSONDecodeError, KeyError, TypeError, ValueError, DomainError) as e:
            Logger.base.warning(f'⚠️ [HOLD-STORE] Discarding unreadable hold record: {e}')
            self._kv_store.remove(self._storage_key)
            return None

        if not hold.is_active(now):
            Logger.base.info(
                f'⌛ [HOLD-STORE] Discarding expired hold {hold.hold_id} '
                f'(expired at {hold.expires_at.isoformat()})'
            )
            self._kv_store.remove(self._storage_key)
            return None

        return hold

    @Logger.io
    def save(self, *, hold: Hold) -> None:
        self._kv_store.set(self._storage_key, orjson.dumps(hold.to_record()).decode())

    @Logger.io
    def clear(self) -> None:
        self._kv_store.remove(self._storage_key)
