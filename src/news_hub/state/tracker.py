"""Reading tracker: read set, bookmarks, history, streak, and preferences."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, timedelta

from news_hub.feed.models import now_ms
from news_hub.state.models import (
    DEFAULT_DAILY_GOAL,
    HistoryEntry,
    Preferences,
    ReadingProgress,
    UserState,
)
from news_hub.state.storage import (
    BOOKMARKS_KEY,
    HISTORY_KEY,
    READ_STORIES_KEY,
    SETTINGS_KEY,
    STREAK_KEY,
    KeyValueStore,
)

logger = logging.getLogger(__name__)
DEFAULT_HISTORY_LIMIT = 50


class UserStateTracker:
    """Owns the user's reading state and persists it after each mutation."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        default_daily_goal: int = DEFAULT_DAILY_GOAL,
        today: Callable[[], date] = date.today,
        clock_ms: Callable[[], int] = now_ms,
    ) -> None:
        self.store = store
        self.history_limit = history_limit
        self.default_daily_goal = default_daily_goal
        self._today = today
        self._clock_ms = clock_ms
        self.state = UserState(daily_goal=default_daily_goal)
        self.preferences = Preferences(daily_goal=default_daily_goal)

    def load(self) -> UserState:
        """Load persisted state and apply the day-boundary rules."""

        settings = self.store.get(SETTINGS_KEY)
        self.preferences = Preferences.from_dict(
            settings if isinstance(settings, dict) else {},
            default_goal=self.default_daily_goal,
        )

        bookmarks = self.store.get(BOOKMARKS_KEY)
        history = self.store.get(HISTORY_KEY)
        streak = self.store.get(STREAK_KEY)
        self.state = UserState(
            bookmarked_urls=_url_set(bookmarks),
            history=_parse_history(history)[: self.history_limit],
            streak=streak if isinstance(streak, int) and streak > 0 else 0,
            daily_goal=self.preferences.daily_goal,
        )

        snapshot = self.store.get(READ_STORIES_KEY)
        if isinstance(snapshot, dict):
            self.state.read_day = _parse_day(snapshot.get("date"))
            self.state.read_urls = _url_set(snapshot.get("stories"))
            goal = snapshot.get("goal")
            stored_goal = goal if isinstance(goal, int) and goal > 0 else DEFAULT_DAILY_GOAL
            self.roll_day(goal_for_stored_day=stored_goal)
        else:
            self.state.read_day = self._today()
        return self.state

    def roll_day(self, *, goal_for_stored_day: int | None = None) -> bool:
        """Close out the recorded read day if it is no longer today.

        Yesterday meeting its goal extends the streak; a gap of more than one
        day resets it. Today's read set starts empty either way.
        """

        today = self._today()
        recorded = self.state.read_day
        if recorded == today:
            return False

        if recorded is not None:
            goal = goal_for_stored_day or self.state.daily_goal
            if recorded == today - timedelta(days=1):
                if len(self.state.read_urls) >= goal:
                    self.state.streak += 1
                    logger.info(
                        "Daily goal met on %s; streak is now %d",
                        recorded,
                        self.state.streak,
                    )
            else:
                if self.state.streak:
                    logger.info("Reading gap since %s; streak reset", recorded)
                self.state.streak = 0

        self.state.read_urls = set()
        self.state.read_day = today
        self.store.set(STREAK_KEY, self.state.streak)
        self._save_read_snapshot()
        return True

    def mark_read(self, url: str, title: str, source: str) -> UserState:
        self.roll_day()
        self.state.read_urls.add(url)
        self._save_read_snapshot()

        self.state.history.insert(
            0,
            HistoryEntry(url=url, title=title, source=source, timestamp=self._clock_ms()),
        )
        del self.state.history[self.history_limit :]
        self.store.set(HISTORY_KEY, [entry.to_dict() for entry in self.state.history])
        return self.state

    def toggle_bookmark(self, url: str) -> bool:
        """Flip bookmark membership and return the new state."""

        if url in self.state.bookmarked_urls:
            self.state.bookmarked_urls.discard(url)
            bookmarked = False
        else:
            self.state.bookmarked_urls.add(url)
            bookmarked = True
        self.store.set(BOOKMARKS_KEY, sorted(self.state.bookmarked_urls))
        return bookmarked

    def is_read(self, url: str) -> bool:
        return url in self.state.read_urls

    def is_bookmarked(self, url: str) -> bool:
        return url in self.state.bookmarked_urls

    def progress(self) -> ReadingProgress:
        return ReadingProgress(
            read_count=len(self.state.read_urls),
            daily_goal=self.state.daily_goal,
            streak=self.state.streak,
        )

    def save_preferences(self, preferences: Preferences) -> None:
        self.preferences = preferences
        self.state.daily_goal = preferences.daily_goal
        self.store.set(SETTINGS_KEY, preferences.to_dict())
        self._save_read_snapshot()

    def _save_read_snapshot(self) -> None:
        self.store.set(
            READ_STORIES_KEY,
            {
                "date": (self.state.read_day or self._today()).isoformat(),
                "stories": sorted(self.state.read_urls),
                "goal": self.state.daily_goal,
            },
        )


def _url_set(value: object) -> set[str]:
    if not isinstance(value, list):
        return set()
    return {str(url) for url in value}


def _parse_day(value: object) -> date | None:
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.warning("Ignoring unreadable read-day %r", value)
        return None


def _parse_history(value: object) -> list[HistoryEntry]:
    if not isinstance(value, list):
        return []
    entries: list[HistoryEntry] = []
    for item in value:
        if isinstance(item, dict) and item.get("url"):
            entries.append(HistoryEntry.from_dict(item))
    return entries
