"""Read-only projections of the aggregated collection for each display surface."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass, field

from news_hub.feed.models import DISPLAY_ORDER, Category, DecoratedStory, Story
from news_hub.state.models import HistoryEntry

LATEST_LIMIT = 5
BIGGEST_LIMIT = 4
SECTION_LIMIT = 8
BRIEFING_LIMIT = 10
RELATED_LIMIT = 3
TRENDING_TOPICS_LIMIT = 8
TRENDING_WORD_MIN_LENGTH = 5

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "is", "are", "was", "were", "will", "has", "have", "had",
    },
)
_NON_WORD_RE = re.compile(r"[^\w]")


@dataclass(slots=True)
class CategorySection:
    category: Category
    stories: list[DecoratedStory]


@dataclass(slots=True)
class HistoryItem:
    """History entry plus the live story when it is still in the collection."""

    entry: HistoryEntry
    story: DecoratedStory | None = None


@dataclass(slots=True)
class FeedViews:
    """Everything the front page shows for one pass."""

    latest: list[DecoratedStory] = field(default_factory=list)
    biggest: list[DecoratedStory] = field(default_factory=list)
    sections: list[CategorySection] = field(default_factory=list)


def latest(stories: Sequence[Story], limit: int = LATEST_LIMIT) -> list[Story]:
    return list(stories[:limit])


def biggest(stories: Iterable[Story], limit: int = BIGGEST_LIMIT) -> list[Story]:
    """Newest stories that carry an image."""

    with_image = [story for story in stories if story.image]
    with_image.sort(key=lambda story: story.timestamp, reverse=True)
    return with_image[:limit]


def category_section(
    stories: Iterable[Story],
    category: Category,
    limit: int = SECTION_LIMIT,
) -> list[Story]:
    return [story for story in stories if story.belongs_to(category)][:limit]


def category_sections(
    stories: Sequence[Story],
    *,
    hidden: Collection[Category] = (),
    limit: int = SECTION_LIMIT,
) -> list[tuple[Category, list[Story]]]:
    """Non-empty sections in display order, skipping hidden categories."""

    sections: list[tuple[Category, list[Story]]] = []
    for category in DISPLAY_ORDER:
        if category in hidden:
            continue
        selected = category_section(stories, category, limit=limit)
        if selected:
            sections.append((category, selected))
    return sections


def daily_briefing(stories: Sequence[Story], limit: int = BRIEFING_LIMIT) -> list[Story]:
    """One newest story per category, topped up with the newest remaining stories.

    A story already picked for an earlier category is not added twice; that
    category takes its newest story not yet picked instead.
    """

    newest_first = sorted(stories, key=lambda story: story.timestamp, reverse=True)
    picked: list[Story] = []
    used_urls: set[str] = set()
    for category in DISPLAY_ORDER:
        top = next(
            (
                story
                for story in newest_first
                if story.belongs_to(category) and story.url not in used_urls
            ),
            None,
        )
        if top is None:
            continue
        picked.append(top)
        used_urls.add(top.url)

    remaining = limit - len(picked)
    if remaining > 0:
        fill = [story for story in newest_first if story.url not in used_urls][:remaining]
        picked.extend(fill)

    picked.sort(key=lambda story: story.timestamp, reverse=True)
    return picked[:limit]


def related_stories(
    stories: Iterable[Story],
    story: Story,
    limit: int = RELATED_LIMIT,
) -> list[Story]:
    """Other stories sharing a category or the same source, in collection order."""

    wanted = set(story.categories)
    related: list[Story] = []
    for candidate in stories:
        if candidate.url == story.url:
            continue
        if wanted.intersection(candidate.categories) or candidate.source == story.source:
            related.append(candidate)
            if len(related) >= limit:
                break
    return related


def find_story(stories: Iterable[Story], url: str) -> Story | None:
    return next((story for story in stories if story.url == url), None)


def saved_stories(stories: Iterable[Story], bookmarked_urls: Collection[str]) -> list[Story]:
    return [story for story in stories if story.url in bookmarked_urls]


def decorate(
    stories: Iterable[Story],
    *,
    read_urls: Collection[str],
    bookmarked_urls: Collection[str],
) -> list[DecoratedStory]:
    return [
        DecoratedStory(
            story=story,
            is_read=story.url in read_urls,
            is_bookmarked=story.url in bookmarked_urls,
        )
        for story in stories
    ]


def history_items(
    history: Iterable[HistoryEntry],
    stories: Sequence[Story],
    *,
    read_urls: Collection[str],
    bookmarked_urls: Collection[str],
) -> list[HistoryItem]:
    by_url: dict[str, Story] = {}
    for story in stories:
        by_url.setdefault(story.url, story)

    items: list[HistoryItem] = []
    for entry in history:
        live = by_url.get(entry.url)
        decorated = None
        if live is not None:
            decorated = decorate([live], read_urls=read_urls, bookmarked_urls=bookmarked_urls)[0]
        items.append(HistoryItem(entry=entry, story=decorated))
    return items


def trending_topics(
    stories: Iterable[Story],
    limit: int = TRENDING_TOPICS_LIMIT,
) -> list[tuple[Category, int]]:
    counts: Counter[Category] = Counter()
    for story in stories:
        counts.update(story.categories)
    return counts.most_common(limit)


def trending_words(stories: Iterable[Story], limit: int = 10) -> list[tuple[str, int]]:
    counts: Counter[str] = Counter()
    for story in stories:
        for raw in story.title.lower().split(" "):
            word = _NON_WORD_RE.sub("", raw)
            if len(word) >= TRENDING_WORD_MIN_LENGTH and word not in STOP_WORDS:
                counts[word] += 1
    return counts.most_common(limit)


def build_feed_views(
    stories: Sequence[Story],
    *,
    read_urls: Collection[str],
    bookmarked_urls: Collection[str],
    hidden: Collection[Category] = (),
) -> FeedViews:
    def _decorate(selected: Iterable[Story]) -> list[DecoratedStory]:
        return decorate(selected, read_urls=read_urls, bookmarked_urls=bookmarked_urls)

    return FeedViews(
        latest=_decorate(latest(stories)),
        biggest=_decorate(biggest(stories)),
        sections=[
            CategorySection(category=category, stories=_decorate(selected))
            for category, selected in category_sections(stories, hidden=hidden)
        ],
    )


def format_age(timestamp_ms: int, now_ms: int) -> str:
    """Relative age such as ``5m ago``, ``3h ago`` or ``2d ago``."""

    minutes = max(0, (now_ms - timestamp_ms) // 60_000)
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"
