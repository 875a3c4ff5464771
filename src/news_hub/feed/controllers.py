"""Controllers for feed and reading-state CLI commands."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from pathlib import Path

from news_hub.config import Settings
from news_hub.feed import views
from news_hub.feed.models import Category, DecoratedStory, Story, now_ms
from news_hub.feed.pipeline import FeedPipeline
from news_hub.feed.providers.base import JsonClient
from news_hub.feed.refresh import RefreshRejected
from news_hub.state.models import FontSize, LayoutMode
from news_hub.state.storage import SQLiteKeyValueStore
from news_hub.state.tracker import UserStateTracker


@dataclass(slots=True)
class FeedCommand:
    """CLI inputs for the front-page command."""

    db_path: Path | None
    cached: bool = False
    category: Category | None = None


@dataclass(slots=True)
class CollectionCommand:
    """CLI inputs for views computed over the cached collection."""

    db_path: Path | None


@dataclass(slots=True)
class RelatedCommand:
    db_path: Path | None
    url: str


@dataclass(slots=True)
class ReadCommand:
    """CLI inputs for recording a read story."""

    db_path: Path | None
    url: str
    title: str | None = None
    source: str | None = None


@dataclass(slots=True)
class BookmarkCommand:
    db_path: Path | None
    url: str


@dataclass(slots=True)
class SettingsCommand:
    """CLI inputs for showing or updating preferences."""

    db_path: Path | None
    daily_goal: int | None = None
    hide: tuple[Category, ...] = ()
    show: tuple[Category, ...] = ()
    layout: LayoutMode | None = None
    font_size: FontSize | None = None
    dark_mode: bool | None = None


class FeedCliController:
    """Coordinates feed command execution."""

    def __init__(self, client: JsonClient | None = None) -> None:
        self.client = client

    def feed(self, command: FeedCommand) -> list[str]:
        lines: list[str] = []
        with self._session(command.db_path) as (pipeline, tracker):
            if command.cached:
                state = pipeline.load_cached()
            else:
                try:
                    state = pipeline.refresh()
                except RefreshRejected as exc:
                    lines.append(f"Notice: {exc}. Showing cached stories.")
                    state = pipeline.load_cached()
            stories = list(state.stories)
            read_urls = tracker.state.read_urls
            bookmarked_urls = tracker.state.bookmarked_urls
            now = now_ms()

            origin = "cache" if state.from_cache else "providers"
            lines.append(f"Stories: {len(stories)} (from {origin})")

            if command.category is not None:
                selected = views.decorate(
                    views.category_section(stories, command.category),
                    read_urls=read_urls,
                    bookmarked_urls=bookmarked_urls,
                )
                lines.append(_heading(command.category.value))
                lines.extend(_story_lines(selected, now=now))
                return lines

            front = views.build_feed_views(
                stories,
                read_urls=read_urls,
                bookmarked_urls=bookmarked_urls,
                hidden=tracker.preferences.hidden_categories,
            )
            lines.append(_heading("Latest"))
            lines.extend(_story_lines(front.latest, now=now))
            lines.append(_heading("Biggest stories"))
            lines.extend(_story_lines(front.biggest, now=now) or ["  (no stories with images)"])
            for section in front.sections:
                lines.append(_heading(section.category.value))
                lines.extend(_story_lines(section.stories, now=now))
        return lines

    def briefing(self, command: CollectionCommand) -> list[str]:
        with self._session(command.db_path) as (pipeline, tracker):
            stories = list(pipeline.load_cached().stories)
            picked = _decorate(views.daily_briefing(stories), tracker)
        return [_heading("Daily briefing"), *_story_lines(picked, now=now_ms())]

    def related(self, command: RelatedCommand) -> list[str]:
        with self._session(command.db_path) as (pipeline, tracker):
            stories = list(pipeline.load_cached().stories)
            story = views.find_story(stories, command.url)
            if story is None:
                return [f"Story not found: {command.url}"]
            related = _decorate(views.related_stories(stories, story), tracker)
        lines = [_heading(f"Related to: {story.title}")]
        lines.extend(_story_lines(related, now=now_ms()) or ["  (no related stories)"])
        return lines

    def read(self, command: ReadCommand) -> list[str]:
        with self._session(command.db_path) as (pipeline, tracker):
            story = views.find_story(pipeline.load_cached().stories, command.url)
            title = command.title or (story.title if story else command.url)
            source = command.source or (story.source if story else "")
            tracker.mark_read(command.url, title, source)
            progress = tracker.progress()
        return [
            f"Marked as read: {title}",
            _progress_line(progress.read_count, progress.daily_goal, progress.streak),
        ]

    def bookmark(self, command: BookmarkCommand) -> list[str]:
        with self._session(command.db_path) as (_pipeline, tracker):
            bookmarked = tracker.toggle_bookmark(command.url)
        if bookmarked:
            return [f"Saved: {command.url}"]
        return [f"Removed from saved: {command.url}"]

    def saved(self, command: CollectionCommand) -> list[str]:
        with self._session(command.db_path) as (pipeline, tracker):
            stories = list(pipeline.load_cached().stories)
            saved = _decorate(
                views.saved_stories(stories, tracker.state.bookmarked_urls),
                tracker,
            )
        lines = [_heading(f"Saved stories ({len(saved)})")]
        lines.extend(_story_lines(saved, now=now_ms()) or ["  (nothing saved yet)"])
        return lines

    def history(self, command: CollectionCommand) -> list[str]:
        with self._session(command.db_path) as (pipeline, tracker):
            items = views.history_items(
                tracker.state.history,
                list(pipeline.load_cached().stories),
                read_urls=tracker.state.read_urls,
                bookmarked_urls=tracker.state.bookmarked_urls,
            )
        now = now_ms()
        lines = [_heading(f"Reading history ({len(items)})")]
        for item in items:
            marker = "" if item.story is not None else " [no longer in feed]"
            lines.append(
                f"  {item.entry.title} ({item.entry.source}, "
                f"{views.format_age(item.entry.timestamp, now)}){marker}",
            )
        if not items:
            lines.append("  (no reading history)")
        return lines

    def progress(self, command: CollectionCommand) -> list[str]:
        with self._session(command.db_path) as (_pipeline, tracker):
            progress = tracker.progress()
        lines = [_progress_line(progress.read_count, progress.daily_goal, progress.streak)]
        if progress.goal_met:
            lines.append("Daily goal reached.")
        return lines

    def trending(self, command: CollectionCommand) -> list[str]:
        with self._session(command.db_path) as (pipeline, _tracker):
            stories = list(pipeline.load_cached().stories)
        lines = [_heading("Trending topics")]
        for category, count in views.trending_topics(stories):
            lines.append(f"  {category.value}: {count}")
        lines.append(_heading("Trending words"))
        for word, count in views.trending_words(stories):
            lines.append(f"  {word}: {count}")
        return lines

    def settings(self, command: SettingsCommand) -> list[str]:
        if command.daily_goal is not None and command.daily_goal <= 0:
            raise ValueError("Daily goal must be > 0.")

        with self._session(command.db_path) as (_pipeline, tracker):
            current = tracker.preferences
            hidden = (set(current.hidden_categories) | set(command.hide)) - set(command.show)
            updated = replace(
                current,
                daily_goal=command.daily_goal or current.daily_goal,
                hidden_categories=frozenset(hidden),
                layout_mode=command.layout or current.layout_mode,
                font_size=command.font_size or current.font_size,
                dark_mode=current.dark_mode if command.dark_mode is None else command.dark_mode,
            )
            if updated != current:
                tracker.save_preferences(updated)

        hidden_names = ", ".join(sorted(category.value for category in updated.hidden_categories))
        return [
            f"Daily goal: {updated.daily_goal}",
            f"Hidden categories: {hidden_names or '-'}",
            f"Layout: {updated.layout_mode.value}",
            f"Font size: {updated.font_size.value}",
            f"Dark mode: {'on' if updated.dark_mode else 'off'}",
        ]

    @contextmanager
    def _session(
        self,
        db_path: Path | None,
    ) -> Iterator[tuple[FeedPipeline, UserStateTracker]]:
        settings = Settings.from_env(db_path=db_path)
        settings.validate()
        with _store(settings) as store:
            tracker = UserStateTracker(
                store,
                history_limit=settings.reading.history_limit,
                default_daily_goal=settings.reading.default_daily_goal,
            )
            tracker.load()
            yield FeedPipeline(settings=settings, store=store, client=self.client), tracker


@contextmanager
def _store(settings: Settings) -> Iterator[SQLiteKeyValueStore]:
    store = SQLiteKeyValueStore(settings.db_path)
    try:
        store.init_schema()
        yield store
    finally:
        store.close()


def _decorate(stories: Iterable[Story], tracker: UserStateTracker) -> list[DecoratedStory]:
    return views.decorate(
        stories,
        read_urls=tracker.state.read_urls,
        bookmarked_urls=tracker.state.bookmarked_urls,
    )


def _heading(title: str) -> str:
    return f"== {title.capitalize() if title.islower() else title} =="


def _story_lines(stories: Iterable[DecoratedStory], *, now: int) -> list[str]:
    lines: list[str] = []
    for item in stories:
        story = item.story
        flags = "".join(
            flag for flag, enabled in ((" [read]", item.is_read), (" [saved]", item.is_bookmarked))
            if enabled
        )
        lines.append(
            f"  [{story.category.value}] {story.title} "
            f"({story.source}, {views.format_age(story.timestamp, now)}, {story.read_time})"
            f"{flags}",
        )
        lines.append(f"    {story.url}")
    return lines


def _progress_line(read_count: int, daily_goal: int, streak: int) -> str:
    return f"Read today: {read_count}/{daily_goal} | Streak: {streak} day(s)"
