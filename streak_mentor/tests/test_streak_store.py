from datetime import date
from types import SimpleNamespace

import pytest
from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from streak_mentor.core.database import get_db_session, kv_entries
from streak_mentor.core.errors import ValidationError
from streak_mentor.features.streaks.store import (
    LAST_VERIFIED_DATE_KEY,
    STREAK_COUNT_KEY,
    InMemoryKeyValueBackend,
    PersistedStreakStore,
    RedisKeyValueBackend,
    SqlKeyValueBackend,
    build_streak_store,
)
from streak_mentor.models.streak import StreakState
from streak_mentor.tests.mocks import FakeRedis


def test_load_defaults_when_nothing_persisted(memory_store):
    assert memory_store.load() == StreakState(streak_count=0, last_verified_date=None)


def test_save_writes_fixed_keys_as_strings():
    backend = InMemoryKeyValueBackend()
    store = PersistedStreakStore(backend)

    store.save(StreakState(streak_count=4, last_verified_date=date(2024, 5, 2)))

    assert backend.values == {STREAK_COUNT_KEY: "4", LAST_VERIFIED_DATE_KEY: "2024-05-02"}
    assert STREAK_COUNT_KEY == "streakCount"
    assert LAST_VERIFIED_DATE_KEY == "lastVerifiedDate"


def test_load_reads_existing_values():
    store = PersistedStreakStore(
        InMemoryKeyValueBackend({"streakCount": "12", "lastVerifiedDate": "2024-01-31"})
    )
    assert store.load() == StreakState(streak_count=12, last_verified_date=date(2024, 1, 31))


@pytest.mark.parametrize(
    "values, expected",
    [
        ({"streakCount": "abc"}, StreakState(0, None)),
        ({"streakCount": "-3"}, StreakState(0, None)),
        ({"streakCount": "2", "lastVerifiedDate": "yesterday"}, StreakState(2, None)),
        ({"streakCount": "2", "lastVerifiedDate": "2024-13-01"}, StreakState(2, None)),
        ({"streakCount": "2", "lastVerifiedDate": ""}, StreakState(2, None)),
    ],
)
def test_corrupt_values_load_as_absent(values, expected):
    store = PersistedStreakStore(InMemoryKeyValueBackend(values))
    assert store.load() == expected


def test_negative_count_is_rejected_on_save(memory_store):
    with pytest.raises(ValidationError):
        memory_store.save(StreakState(streak_count=-1, last_verified_date=date(2024, 5, 1)))


def test_sql_backend_survives_a_new_store_instance(sqlite_engine):
    first = PersistedStreakStore(SqlKeyValueBackend(sqlite_engine, namespace="techchat"))
    first.save(StreakState(streak_count=1, last_verified_date=date(2024, 5, 1)))
    first.save(StreakState(streak_count=2, last_verified_date=date(2024, 5, 2)))

    # Simulates a process restart against the same database.
    second = PersistedStreakStore(SqlKeyValueBackend(sqlite_engine, namespace="techchat"))
    assert second.load() == StreakState(streak_count=2, last_verified_date=date(2024, 5, 2))
    assert second.ping() is True


def test_sql_backend_namespaces_are_isolated(sqlite_engine):
    a = PersistedStreakStore(SqlKeyValueBackend(sqlite_engine, namespace="a"))
    b = PersistedStreakStore(SqlKeyValueBackend(sqlite_engine, namespace="b"))

    a.save(StreakState(streak_count=5, last_verified_date=date(2024, 5, 5)))

    assert b.load() == StreakState()
    assert a.load().streak_count == 5


def test_db_session_rolls_back_on_error(sqlite_engine):
    SqlKeyValueBackend(sqlite_engine, namespace="techchat")
    session_factory = sessionmaker(bind=sqlite_engine)

    with pytest.raises(RuntimeError):
        with get_db_session(session_factory) as session:
            session.execute(kv_entries.insert().values(namespace="techchat", key="streakCount", value="9"))
            raise RuntimeError("boom")

    with get_db_session(session_factory) as session:
        assert session.execute(select(kv_entries.c.value)).first() is None


def test_redis_backend_uses_namespaced_keys_in_one_pipeline():
    fake = FakeRedis()
    store = PersistedStreakStore(RedisKeyValueBackend(fake, namespace="techchat"))

    store.save(StreakState(streak_count=3, last_verified_date=date(2024, 5, 3)))

    assert fake.pipelines == 1
    assert fake.data == {
        "techchat:streakCount": b"3",
        "techchat:lastVerifiedDate": b"2024-05-03",
    }
    assert store.load() == StreakState(streak_count=3, last_verified_date=date(2024, 5, 3))


def test_build_streak_store_memory_backend():
    cfg = SimpleNamespace(STREAK_STORE_BACKEND="memory", STREAK_STORE_NAMESPACE="techchat")
    store = build_streak_store(cfg)
    assert isinstance(store.backend, InMemoryKeyValueBackend)


def test_build_streak_store_sql_backend(tmp_path):
    cfg = SimpleNamespace(
        STREAK_STORE_BACKEND="sql",
        STREAK_STORE_NAMESPACE="techchat",
        DATABASE_URL=f"sqlite:///{tmp_path / 'streaks.db'}",
    )
    store = build_streak_store(cfg)
    store.save(StreakState(streak_count=1, last_verified_date=date(2024, 5, 1)))

    reopened = build_streak_store(cfg)
    assert reopened.load().streak_count == 1


def test_build_streak_store_rejects_unknown_backend():
    cfg = SimpleNamespace(STREAK_STORE_BACKEND="etcd", STREAK_STORE_NAMESPACE="techchat")
    with pytest.raises(ValidationError):
        build_streak_store(cfg)
