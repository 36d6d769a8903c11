"""Catalog Store: persists the whole ``AppData`` aggregate under one key.

Backends:
- ``SqlCatalogStore``: a row in the ``kv_records`` table (sqlite by default)
- ``RedisCatalogStore``: a Redis string key

Both share the load policy: a missing or unreadable record yields fresh
default data, and an outdated ``version`` is migrated by merging in default
ingredients and measurements before being written back. Failures are logged,
never raised to the caller.
"""

import logging
import secrets
import string
import time
from typing import Optional, Protocol, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import sessionmaker

from ..db import session_scope
from ..infra.redis_client import get_sync_redis
from ..models import KeyValueRecord
from ..schemas import AppData
from ..settings import settings
from .seed_data import DATA_VERSION, default_app_data, default_ingredients, default_measurements

logger = logging.getLogger("cucina.store")

_ALPHABET = string.digits + string.ascii_lowercase


def _base36(n: int) -> str:
    out = ""
    while True:
        n, r = divmod(n, 36)
        out = _ALPHABET[r] + out
        if n == 0:
            return out


def generate_id() -> str:
    """Millisecond timestamp in base 36 followed by a random base-36 suffix."""
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(11))
    return _base36(int(time.time() * 1000)) + suffix


# --- Migration ---

Named = TypeVar("Named", bound=BaseModel)


def merge_default_items(existing: list[Named], defaults: list[Named]) -> list[Named]:
    """Append defaults whose id and case-insensitive name are both unused."""
    ids = {item.id for item in existing}
    names = {item.name.lower() for item in existing}
    missing = [d for d in defaults if d.id not in ids and d.name.lower() not in names]
    return [*existing, *missing]


def migrate(data: AppData) -> bool:
    """Bring ``data`` up to DATA_VERSION in place. Returns True if it changed."""
    if data.version is not None and data.version >= DATA_VERSION:
        return False
    logger.info(f"Migrating catalog from version {data.version} to {DATA_VERSION}")
    data.ingredients = merge_default_items(data.ingredients, default_ingredients())
    data.measurements = merge_default_items(data.measurements, default_measurements())
    data.version = DATA_VERSION
    return True


# --- Stores ---

class CatalogStore(Protocol):
    def load(self) -> AppData: ...

    def save(self, data: AppData) -> None: ...


class _JsonCatalogStore:
    """Load/save policy over a raw ``_read``/``_write`` of one JSON document."""

    key: str

    def _read(self) -> Optional[str]:
        raise NotImplementedError

    def _write(self, payload: str) -> None:
        raise NotImplementedError

    def load(self) -> AppData:
        try:
            raw = self._read()
        except Exception:
            logger.exception(f"Catalog store unavailable for key {self.key}; using defaults")
            return default_app_data()

        if raw is None:
            logger.info(f"No catalog stored under {self.key}; starting from defaults")
            return default_app_data()

        try:
            data = AppData.model_validate_json(raw)
        except ValueError:
            logger.exception(f"Stored catalog under {self.key} is corrupt; using defaults")
            return default_app_data()

        if migrate(data):
            self.save(data)
        return data

    def save(self, data: AppData) -> None:
        try:
            self._write(data.model_dump_json())
        except Exception:
            logger.exception(f"Failed to save catalog under {self.key}")


class SqlCatalogStore(_JsonCatalogStore):
    def __init__(self, session_factory: Optional[sessionmaker] = None, key: Optional[str] = None):
        self.key = key or settings.store_key
        self._session_factory = session_factory

    def _read(self) -> Optional[str]:
        with session_scope(self._session_factory) as db:
            record = db.get(KeyValueRecord, self.key)
            return record.payload if record else None

    def _write(self, payload: str) -> None:
        with session_scope(self._session_factory) as db:
            record = db.get(KeyValueRecord, self.key)
            if record is None:
                db.add(KeyValueRecord(key=self.key, payload=payload))
            else:
                record.payload = payload


class RedisCatalogStore(_JsonCatalogStore):
    def __init__(self, client=None, key: Optional[str] = None):
        self.key = key or settings.store_key
        self._client = client

    def _redis(self):
        return self._client if self._client is not None else get_sync_redis()

    def _read(self) -> Optional[str]:
        return self._redis().get(self.key)

    def _write(self, payload: str) -> None:
        self._redis().set(self.key, payload)


def build_store() -> CatalogStore:
    if settings.store_backend == "redis":
        return RedisCatalogStore()
    return SqlCatalogStore()
