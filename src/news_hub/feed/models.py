"""Domain models for provider normalization, aggregation, and views."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum


class Category(str, Enum):
    """Fixed topic enumeration; ``WORLD`` is the fallback."""

    POLITICS = "politics"
    BUSINESS = "business"
    TECHNOLOGY = "technology"
    SPORTS = "sports"
    HEALTH = "health"
    SCIENCE = "science"
    ENTERTAINMENT = "entertainment"
    LIFESTYLE = "lifestyle"
    WORLD = "world"


# Priority used by both classifiers; first match wins for the primary category.
CLASSIFICATION_ORDER: tuple[Category, ...] = (
    Category.POLITICS,
    Category.BUSINESS,
    Category.TECHNOLOGY,
    Category.SPORTS,
    Category.HEALTH,
    Category.SCIENCE,
    Category.ENTERTAINMENT,
    Category.LIFESTYLE,
)

# Order of per-category sections and of the daily briefing walk.
DISPLAY_ORDER: tuple[Category, ...] = (
    Category.POLITICS,
    Category.BUSINESS,
    Category.TECHNOLOGY,
    Category.SPORTS,
    Category.WORLD,
    Category.HEALTH,
    Category.SCIENCE,
    Category.ENTERTAINMENT,
    Category.LIFESTYLE,
)


@dataclass(frozen=True, slots=True)
class Outlet:
    """Configured news outlet, independent of the provider that supplies it."""

    name: str
    url: str
    color: str = "#666666"


@dataclass(frozen=True, slots=True)
class Story:
    """Canonical story record shared by every provider."""

    source: str
    title: str
    description: str
    timestamp: int
    category: Category
    categories: tuple[Category, ...]
    url: str
    image: str | None
    read_time: str

    def belongs_to(self, category: Category) -> bool:
        return self.category == category or category in self.categories

    def to_dict(self) -> dict[str, object]:
        return {
            "source": self.source,
            "title": self.title,
            "description": self.description,
            "timestamp": self.timestamp,
            "category": self.category.value,
            "categories": [item.value for item in self.categories],
            "url": self.url,
            "image": self.image,
            "readTime": self.read_time,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> Story:
        categories = tuple(Category(str(item)) for item in payload.get("categories") or ())
        category = Category(str(payload.get("category") or Category.WORLD.value))
        image = payload.get("image")
        return cls(
            source=str(payload["source"]),
            title=str(payload["title"]),
            description=str(payload.get("description") or ""),
            timestamp=int(payload["timestamp"]),  # type: ignore[arg-type]
            category=category,
            categories=categories or (Category.WORLD,),
            url=str(payload["url"]),
            image=str(image) if image else None,
            read_time=str(payload.get("readTime") or "1 min read"),
        )


@dataclass(frozen=True, slots=True)
class DecoratedStory:
    """Story plus per-user flags attached at presentation time."""

    story: Story
    is_read: bool
    is_bookmarked: bool


@dataclass(slots=True)
class ProviderResult:
    """Stories produced by one provider call."""

    provider_id: str
    label: str
    stories: list[Story] = field(default_factory=list)
    error: str | None = None


@dataclass(frozen=True, slots=True)
class AppState:
    """Result of one aggregation pass."""

    stories: tuple[Story, ...] = ()
    refreshed_at_ms: int | None = None
    from_cache: bool = False


def now_ms() -> int:
    """Current wall-clock time in milliseconds since epoch."""

    return int(time.time() * 1000)
