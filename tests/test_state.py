# tests/test_state.py
import pytest

from fafgear_exporter.state import (
    FIELD_COUNT,
    STATUS_FIELDS,
    FetchResult,
    StatusField,
    StatusSnapshot,
)


def test_field_schema_order():
    """字段表顺序是协议约定，不能漂移"""
    assert FIELD_COUNT == 11
    assert [f.metric_name for f in STATUS_FIELDS] == [
        "query_queue_size",
        "database_connections_max",
        "database_connections_active",
        "threadpool_input_count",
        "threadpool_input_running",
        "threadpool_input_queued",
        "threadpool_input_total",
        "threadpool_database_count",
        "threadpool_database_running",
        "threadpool_database_queued",
        "threadpool_database_total",
    ]
    assert [int(f) for f in STATUS_FIELDS] == list(range(11))


def test_unreachable_snapshot():
    snap = StatusSnapshot.unreachable()
    assert snap.reachable is False
    assert snap.up == 0
    assert snap.fields == (0,) * 11
    assert set(snap.as_dict().values()) == {0}


def test_snapshot_accessors():
    snap = StatusSnapshot(reachable=True, fields=(3, 10, 2) + (0,) * 8)
    assert snap.up == 1
    assert snap.get(StatusField.DATABASE_CONNECTIONS_MAX) == 10
    assert snap.as_dict()["query_queue_size"] == 3
    assert list(snap.as_dict()) == [f.metric_name for f in STATUS_FIELDS]


def test_snapshot_wrong_field_count():
    with pytest.raises(ValueError):
        StatusSnapshot(reachable=True, fields=(1, 2, 3))


def test_snapshot_is_immutable():
    snap = StatusSnapshot.unreachable()
    with pytest.raises(AttributeError):
        snap.reachable = True  # type: ignore[misc]


def test_fetch_result_defaults():
    assert FetchResult(ok=False).payload == ""
