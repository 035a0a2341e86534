from __future__ import annotations

import sqlite3
from datetime import timedelta

import pytest

from adapters.sqlite_storage import SQLiteOptionStore
from core.config import NotifierConfig
from core.errors import StorageUnavailable
from core.models import NoticeDecision, ReviewAction
from core.notifier import SnoozeNotifier
from fakes import T0, FakeCapabilities, FakeClock

@pytest.fixture
def sqlite_store(tmp_path) -> SQLiteOptionStore:
    store = SQLiteOptionStore(str(tmp_path / "options.db"))
    store.init_db()
    return store

def test_get_set_delete(sqlite_store) -> None:
    assert sqlite_store.get("worb_a_check") is None

    sqlite_store.set("worb_a_check", 1704067200)
    sqlite_store.set("worb_a_nobug", True)
    assert sqlite_store.get("worb_a_check") == 1704067200
    assert sqlite_store.get("worb_a_nobug") is True

    sqlite_store.set("worb_a_check", 1704153600)
    assert sqlite_store.get("worb_a_check") == 1704153600

    sqlite_store.delete("worb_a_check")
    sqlite_store.delete("worb_a_missing")
    assert sqlite_store.get("worb_a_check") is None

def test_add_only_inserts_missing_keys(sqlite_store) -> None:
    assert sqlite_store.add("worb_a_check", 1) is True
    assert sqlite_store.add("worb_a_check", 2) is False
    assert sqlite_store.get("worb_a_check") == 1

def test_state_survives_new_store_instance(tmp_path) -> None:
    path = str(tmp_path / "options.db")
    first = SQLiteOptionStore(path)
    first.init_db()
    first.set("worb_a_nobug", True)

    second = SQLiteOptionStore(path)
    assert second.get("worb_a_nobug") is True

def test_failures_are_wrapped(tmp_path) -> None:
    store = SQLiteOptionStore(str(tmp_path / "missing-dir" / "options.db"))

    with pytest.raises(StorageUnavailable):
        store.init_db()
    with pytest.raises(StorageUnavailable):
        store.get("worb_a_check")
    with pytest.raises(StorageUnavailable):
        store.set("worb_a_check", 1)

def test_uninitialized_database_reports_unavailable(tmp_path) -> None:
    store = SQLiteOptionStore(str(tmp_path / "options.db"))

    with pytest.raises(StorageUnavailable):
        store.get("worb_a_check")

def test_notifier_over_sqlite(sqlite_store) -> None:
    clock = FakeClock(T0)
    notifier = SnoozeNotifier(NotifierConfig(), sqlite_store, FakeCapabilities(), clock)

    notifier.on_activate("my-plugin")
    assert notifier.evaluate("my-plugin", now=T0 + timedelta(days=7)) is NoticeDecision.DUE

    notifier.apply_action("my-plugin", ReviewAction.NEVER_ASK)
    assert notifier.evaluate("my-plugin", now=T0 + timedelta(days=70)) is NoticeDecision.SUPPRESSED

    notifier.on_deactivate("my-plugin")
    assert sqlite_store.get("worb_my-plugin_nobug") is None

def test_undecodable_value_is_reported_unavailable(sqlite_store, tmp_path) -> None:
    with sqlite3.connect(str(tmp_path / "options.db")) as conn:
        conn.execute(
            "INSERT INTO options (option_name, option_value) VALUES (?, ?)",
            ("worb_my-plugin_check", "garbage"),
        )

    with pytest.raises(StorageUnavailable):
        sqlite_store.get("worb_my-plugin_check")

    notifier = SnoozeNotifier(NotifierConfig(), sqlite_store, FakeCapabilities(), FakeClock(T0))
    assert notifier.evaluate("my-plugin", now=T0 + timedelta(days=30)) is NoticeDecision.SUPPRESSED
