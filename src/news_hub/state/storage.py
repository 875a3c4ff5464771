"""Key-value persistence for user state and the cached collection."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, Session, SQLModel, create_engine

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"
READ_STORIES_KEY = "read_stories"
BOOKMARKS_KEY = "bookmarked_stories"
HISTORY_KEY = "reading_history"
STREAK_KEY = "reading_streak"
FEED_SNAPSHOT_KEY = "feed_snapshot"
LAST_REFRESH_KEY = "last_refresh_ms"


class KeyValueStore(Protocol):
    """Get/set of JSON-compatible values by string key."""

    def get(self, key: str) -> object | None:
        raise NotImplementedError

    def set(self, key: str, value: object) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class KeyValueEntry(SQLModel, table=True):
    __tablename__ = "kv_entries"  # type: ignore[bad-override]

    key: str = Field(primary_key=True)
    value: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))


class SQLiteKeyValueStore:
    """Facade that stores JSON values in one SQLite table via SQLModel."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.engine = create_engine(
            f"sqlite:///{db_path}",
            connect_args={"check_same_thread": False},
        )

    def init_schema(self) -> None:
        SQLModel.metadata.create_all(
            self.engine,
            tables=[KeyValueEntry.__table__],  # type: ignore[attr-defined]
        )

    def close(self) -> None:
        self.engine.dispose()

    def get(self, key: str) -> object | None:
        with Session(self.engine) as session:
            row = session.get(KeyValueEntry, key)
            if row is None:
                return None
            raw = row.value
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring corrupt value for key %s: %s", key, exc)
            return None

    def set(self, key: str, value: object) -> None:
        encoded = json.dumps(value)
        with Session(self.engine) as session:
            row = session.get(KeyValueEntry, key)
            now = datetime.now(tz=UTC)
            if row is None:
                session.add(KeyValueEntry(key=key, value=encoded, updated_at=now))
            else:
                row.value = encoded
                row.updated_at = now
                session.add(row)
            session.commit()

    def delete(self, key: str) -> None:
        with Session(self.engine) as session:
            row = session.get(KeyValueEntry, key)
            if row is not None:
                session.delete(row)
                session.commit()

    def __enter__(self) -> SQLiteKeyValueStore:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
