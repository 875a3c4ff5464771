from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import allure
from sqlmodel import Session

from news_hub.state.storage import KeyValueEntry, SQLiteKeyValueStore

pytestmark = [
    allure.epic("Reading State"),
    allure.feature("Persistence"),
]


def _store(tmp_path: Path) -> SQLiteKeyValueStore:
    store = SQLiteKeyValueStore(tmp_path / "state.db")
    store.init_schema()
    return store


def test_set_get_round_trip_and_overwrite(tmp_path: Path) -> None:
    with _store(tmp_path) as store:
        assert store.get("reading_streak") is None

        store.set("read_stories", {"date": "2024-01-15", "stories": ["a"], "goal": 10})
        store.set("reading_streak", 2)
        store.set("reading_streak", 3)

        assert store.get("read_stories") == {"date": "2024-01-15", "stories": ["a"], "goal": 10}
        assert store.get("reading_streak") == 3


def test_values_survive_reopen(tmp_path: Path) -> None:
    with _store(tmp_path) as store:
        store.set("bookmarked_stories", ["https://x.example/1"])

    with _store(tmp_path) as reopened:
        assert reopened.get("bookmarked_stories") == ["https://x.example/1"]


def test_delete_removes_key(tmp_path: Path) -> None:
    with _store(tmp_path) as store:
        store.set("settings", {"dailyGoal": 5})
        store.delete("settings")
        store.delete("never-set")

        assert store.get("settings") is None


def test_corrupt_value_reads_as_missing(tmp_path: Path, caplog) -> None:
    with _store(tmp_path) as store:
        with Session(store.engine) as session:
            session.add(
                KeyValueEntry(
                    key="reading_history",
                    value="{not json",
                    updated_at=datetime.now(tz=UTC),
                ),
            )
            session.commit()

        assert store.get("reading_history") is None
    assert "corrupt value" in caplog.text
