"""
Durable storage for the two streak scalars.

The persisted layout is fixed: ``streakCount`` (integer as string) and
``lastVerifiedDate`` (``YYYY-MM-DD``) under a per-instance namespace. Backends
only know about string keys and values; ``PersistedStreakStore`` owns the
mapping to ``StreakState``.

Single writer, last write wins. No locking across processes.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Dict, Optional, Protocol

from redis import Redis
from sqlalchemy import insert, select, update
from sqlalchemy.orm import sessionmaker

from streak_mentor.core.database import build_engine, create_all_tables, get_db_session, kv_entries
from streak_mentor.core.errors import ValidationError
from streak_mentor.models.streak import StreakState

logger = logging.getLogger("streak_mentor")

STREAK_COUNT_KEY = "streakCount"
LAST_VERIFIED_DATE_KEY = "lastVerifiedDate"
DATE_FORMAT = "%Y-%m-%d"


class KeyValueBackend(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set_many(self, values: Dict[str, str]) -> None:
        ...

    def ping(self) -> bool:
        ...


class InMemoryKeyValueBackend:
    """Process-local backend for tests and STREAK_STORE_BACKEND=memory."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set_many(self, values: Dict[str, str]) -> None:
        self.values.update(values)

    def ping(self) -> bool:
        return True


class SqlKeyValueBackend:
    """SQLAlchemy Core backend over the ``kv_entries`` table."""

    def __init__(self, engine, namespace: str):
        self._engine = engine
        self._namespace = namespace
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        create_all_tables(engine)

    @classmethod
    def from_url(cls, url: str, namespace: str) -> "SqlKeyValueBackend":
        return cls(build_engine(url), namespace)

    def get(self, key: str) -> Optional[str]:
        with get_db_session(self._session_factory) as session:
            row = session.execute(
                select(kv_entries.c.value).where(
                    kv_entries.c.namespace == self._namespace,
                    kv_entries.c.key == key,
                )
            ).first()
        return row[0] if row else None

    def set_many(self, values: Dict[str, str]) -> None:
        # One session so both scalars commit together.
        with get_db_session(self._session_factory) as session:
            for key, value in values.items():
                result = session.execute(
                    update(kv_entries)
                    .where(kv_entries.c.namespace == self._namespace, kv_entries.c.key == key)
                    .values(value=value)
                )
                if result.rowcount == 0:
                    session.execute(
                        insert(kv_entries).values(namespace=self._namespace, key=key, value=value)
                    )

    def ping(self) -> bool:
        with self._engine.connect() as conn:
            conn.exec_driver_sql("SELECT 1")
        return True


class RedisKeyValueBackend:
    """Redis backend; keys are ``<namespace>:<key>``."""

    def __init__(self, client: Redis, namespace: str):
        self._client = client
        self._namespace = namespace

    @classmethod
    def from_url(cls, url: str, namespace: str) -> "RedisKeyValueBackend":
        return cls(Redis.from_url(url, decode_responses=True), namespace)

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def get(self, key: str) -> Optional[str]:
        value = self._client.get(self._key(key))
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set_many(self, values: Dict[str, str]) -> None:
        pipe = self._client.pipeline(transaction=True)
        for key, value in values.items():
            pipe.set(self._key(key), value)
        pipe.execute()

    def ping(self) -> bool:
        return bool(self._client.ping())


def parse_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` calendar date."""
    if not isinstance(value, str) or len(value.strip()) != 10:
        raise ValueError(f"not a YYYY-MM-DD date: {value!r}")
    return datetime.strptime(value.strip(), DATE_FORMAT).date()


class PersistedStreakStore:
    """Load and save ``StreakState`` through a key/value backend."""

    def __init__(self, backend: KeyValueBackend):
        self.backend = backend

    def load(self) -> StreakState:
        raw_count = self.backend.get(STREAK_COUNT_KEY)
        raw_date = self.backend.get(LAST_VERIFIED_DATE_KEY)

        count = 0
        if raw_count is not None:
            try:
                count = int(raw_count)
            except ValueError:
                logger.warning("streak_store.invalid_count", extra={"event_type": "streak_store.invalid_count"})
                count = 0
            if count < 0:
                logger.warning("streak_store.negative_count", extra={"event_type": "streak_store.invalid_count"})
                count = 0

        last_date = None
        if raw_date:
            try:
                last_date = parse_date(raw_date)
            except ValueError:
                logger.warning("streak_store.invalid_date", extra={"event_type": "streak_store.invalid_date"})
                last_date = None

        return StreakState(streak_count=count, last_verified_date=last_date)

    def save(self, state: StreakState) -> None:
        if state.streak_count < 0:
            raise ValidationError("streak_count must be >= 0")
        values = {STREAK_COUNT_KEY: str(state.streak_count)}
        if state.last_verified_date is not None:
            values[LAST_VERIFIED_DATE_KEY] = state.last_verified_date.strftime(DATE_FORMAT)
        self.backend.set_many(values)

    def ping(self) -> bool:
        return self.backend.ping()


def build_streak_store(settings_obj) -> PersistedStreakStore:
    """Select the backend named by STREAK_STORE_BACKEND."""
    backend_name = (settings_obj.STREAK_STORE_BACKEND or "sql").lower()
    namespace = settings_obj.STREAK_STORE_NAMESPACE
    if backend_name == "memory":
        backend: KeyValueBackend = InMemoryKeyValueBackend()
    elif backend_name == "redis":
        backend = RedisKeyValueBackend.from_url(settings_obj.REDIS_URL, namespace)
    elif backend_name == "sql":
        if not settings_obj.DATABASE_URL:
            raise ValidationError("DATABASE_URL is required for the sql streak store")
        backend = SqlKeyValueBackend.from_url(settings_obj.DATABASE_URL, namespace)
    else:
        raise ValidationError(f"Unknown streak store backend: {backend_name}")
    logger.info(f"[streak_store] using {backend_name} backend")
    return PersistedStreakStore(backend)
