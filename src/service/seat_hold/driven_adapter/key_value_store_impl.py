"""
Key-value store backends for hold persistence.

- InMemoryKeyValueStore: process-lifetime only (tests, embedded use)
- FileKeyValueStore: one JSON document on disk, survives restarts
"""

import os
from pathlib import Path
import tempfile
from typing import Dict, Optional

import orjson

from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.interface.i_key_value_store import IKeyValueStore


class InMemoryKeyValueStore(IKeyValueStore):
    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FileKeyValueStore(IKeyValueStore):
    """
    Every write rewrites the whole document through a temp file followed by
    os.replace, so a crash mid-write leaves the previous document intact.
    """

    def __init__(self, *, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> Dict[str, str]:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return {}

        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError:
            Logger.base.warning(f'⚠️ [KV-STORE] Unreadable store file {self._path}, starting empty')
            return {}

        if not isinstance(data, dict):
            Logger.base.warning(f'⚠️ [KV-STORE] Unexpected store layout in {self._path}, starting empty')
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write_all(self, data: Dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, prefix=f'.{self._path.name}.')
        try:
            with os.fdopen(fd, 'wb') as tmp_file:
                tmp_file.write(orjson.dumps(data))
            os.replace(tmp_path, self._path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if key not in data:
            return
        del data[key]
        self._write_all(data)
