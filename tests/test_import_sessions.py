"""Tests for the in-memory import session store."""

from datetime import timedelta

from venuscms.models import ImportSession, ImportSessionStore
from venuscms.schemas.import_schemas import RecordType
from venuscms.services.import_service import parse_csv_text


def _session(created_at, name: str = "documents.csv") -> ImportSession:
    return ImportSession(
        filename=name,
        record_type=RecordType.DOCUMENT,
        table=parse_csv_text("Title,Content,Category\nA,x,gacha\n"),
        created_at=created_at,
    )


def test_add_validates_session(clock) -> None:
    store = ImportSessionStore(clock=clock)
    session = store.add(_session(clock()))
    assert store.get(session.id) is session
    assert session.issues == []
    assert session.can_import is True
    assert len(store) == 1


def test_expired_sessions_are_dropped(clock) -> None:
    store = ImportSessionStore(ttl_minutes=60, clock=clock)
    old = store.add(_session(clock()))

    clock.advance(30 * 60 * 1000)
    fresh = store.add(_session(clock()))

    clock.advance(30 * 60 * 1000 + 1)
    assert store.get(old.id) is None
    assert store.get(fresh.id) is fresh
    assert len(store) == 1


def test_oldest_sessions_dropped_beyond_limit(clock) -> None:
    store = ImportSessionStore(max_sessions=2, clock=clock)
    sessions = []
    for minute in range(3):
        sessions.append(store.add(_session(clock() + timedelta(minutes=minute))))

    assert len(store) == 2
    assert store.get(sessions[0].id) is None
    assert store.get(sessions[2].id) is sessions[2]


def test_running_session_is_never_dropped(clock) -> None:
    store = ImportSessionStore(max_sessions=1, ttl_minutes=1, clock=clock)
    running = store.add(_session(clock()))
    assert store.begin_run(running.id) is True

    clock.advance(10 * 60 * 1000)
    assert store.prune() == 0
    assert store.get(running.id) is running
    assert store.discard(running.id) is False

    store.end_run(running.id)
    assert store.prune() == 1
    assert len(store) == 0


def test_single_active_run(clock) -> None:
    store = ImportSessionStore(clock=clock)
    first = store.add(_session(clock()))
    second = store.add(_session(clock()))

    assert store.begin_run(first.id) is True
    assert store.begin_run(second.id) is False
    assert store.active_run == first.id

    store.end_run(second.id)
    assert store.active_run == first.id
    store.end_run(first.id)
    assert store.active_run is None
