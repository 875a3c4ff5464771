"""User state and preference models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from news_hub.feed.models import Category

DEFAULT_DAILY_GOAL = 10


class LayoutMode(str, Enum):
    GRID = "grid"
    LIST = "list"


class FontSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """One read event, most recent first in the history list."""

    url: str
    title: str
    source: str
    timestamp: int

    def to_dict(self) -> dict[str, object]:
        return {
            "url": self.url,
            "title": self.title,
            "source": self.source,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> HistoryEntry:
        return cls(
            url=str(payload["url"]),
            title=str(payload.get("title") or ""),
            source=str(payload.get("source") or ""),
            timestamp=int(payload.get("timestamp") or 0),  # type: ignore[call-overload]
        )


@dataclass(slots=True)
class Preferences:
    """Display and goal settings persisted as one blob."""

    daily_goal: int = DEFAULT_DAILY_GOAL
    hidden_categories: frozenset[Category] = frozenset()
    layout_mode: LayoutMode = LayoutMode.GRID
    font_size: FontSize = FontSize.MEDIUM
    dark_mode: bool = False

    def to_dict(self) -> dict[str, object]:
        return {
            "dailyGoal": self.daily_goal,
            "hiddenCategories": sorted(category.value for category in self.hidden_categories),
            "layoutMode": self.layout_mode.value,
            "fontSize": self.font_size.value,
            "darkMode": self.dark_mode,
        }

    @classmethod
    def from_dict(
        cls,
        payload: dict[str, object],
        *,
        default_goal: int = DEFAULT_DAILY_GOAL,
    ) -> Preferences:
        """Tolerant loader: unknown or missing values fall back to defaults."""

        goal = payload.get("dailyGoal")
        hidden_raw = payload.get("hiddenCategories")
        hidden = {
            _enum_or(Category, item, None)
            for item in (hidden_raw if isinstance(hidden_raw, list) else [])
        }
        hidden.discard(None)
        return cls(
            daily_goal=goal if isinstance(goal, int) and goal > 0 else default_goal,
            hidden_categories=frozenset(hidden),  # type: ignore[arg-type]
            layout_mode=_enum_or(LayoutMode, payload.get("layoutMode"), LayoutMode.GRID),
            font_size=_enum_or(FontSize, payload.get("fontSize"), FontSize.MEDIUM),
            dark_mode=bool(payload.get("darkMode", False)),
        )


@dataclass(slots=True)
class UserState:
    """Session-scoped reading state, persisted after each mutation."""

    read_urls: set[str] = field(default_factory=set)
    read_day: date | None = None
    bookmarked_urls: set[str] = field(default_factory=set)
    history: list[HistoryEntry] = field(default_factory=list)
    streak: int = 0
    daily_goal: int = DEFAULT_DAILY_GOAL


@dataclass(frozen=True, slots=True)
class ReadingProgress:
    read_count: int
    daily_goal: int
    streak: int

    @property
    def goal_met(self) -> bool:
        return self.read_count >= self.daily_goal


def _enum_or(enum_cls: type[Enum], value: object, default: Any) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        return default
