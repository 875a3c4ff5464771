"""CLI entrypoint for news-hub."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import rich_click as click

from news_hub import __version__
from news_hub.feed.controllers import (
    BookmarkCommand,
    CollectionCommand,
    FeedCliController,
    FeedCommand,
    ReadCommand,
    RelatedCommand,
    SettingsCommand,
)
from news_hub.feed.models import DISPLAY_ORDER, Category
from news_hub.state.models import FontSize, LayoutMode

click.rich_click.USE_MARKDOWN = True
FEED_CONTROLLER = FeedCliController()

_CATEGORY_CHOICE = click.Choice([category.value for category in DISPLAY_ORDER])
_DB_PATH_OPTION = click.option(
    "--db-path",
    type=click.Path(path_type=Path),
    default=None,
    help="SQLite DB path.",
)


@click.group()
@click.version_option(version=__version__, prog_name="news-hub")
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
def news_hub(verbose: bool) -> None:
    """Aggregated news from several providers, with reading progress."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@news_hub.command("feed")
@_DB_PATH_OPTION
@click.option("--cached", is_flag=True, help="Skip the refresh and show the cached collection.")
@click.option("--category", type=_CATEGORY_CHOICE, default=None, help="Show one section only.")
def feed(db_path: Path | None, cached: bool, category: str | None) -> None:
    """Refresh the collection and print the front page."""

    _run(
        FEED_CONTROLLER.feed,
        FeedCommand(
            db_path=db_path,
            cached=cached,
            category=Category(category) if category else None,
        ),
    )


@news_hub.command("briefing")
@_DB_PATH_OPTION
def briefing(db_path: Path | None) -> None:
    """Print the daily briefing: one top story per category, topped up to ten."""

    _run(FEED_CONTROLLER.briefing, CollectionCommand(db_path=db_path))


@news_hub.command("related")
@_DB_PATH_OPTION
@click.argument("url")
def related(db_path: Path | None, url: str) -> None:
    """Print stories related to the story at URL."""

    _run(FEED_CONTROLLER.related, RelatedCommand(db_path=db_path, url=url))


@news_hub.command("read")
@_DB_PATH_OPTION
@click.argument("url")
@click.option("--title", default=None, help="Title to record when the story is not cached.")
@click.option("--source", default=None, help="Source to record when the story is not cached.")
def read(db_path: Path | None, url: str, title: str | None, source: str | None) -> None:
    """Mark the story at URL as read today."""

    _run(
        FEED_CONTROLLER.read,
        ReadCommand(db_path=db_path, url=url, title=title, source=source),
    )


@news_hub.command("bookmark")
@_DB_PATH_OPTION
@click.argument("url")
def bookmark(db_path: Path | None, url: str) -> None:
    """Save or unsave the story at URL."""

    _run(FEED_CONTROLLER.bookmark, BookmarkCommand(db_path=db_path, url=url))


@news_hub.command("saved")
@_DB_PATH_OPTION
def saved(db_path: Path | None) -> None:
    """List saved stories still present in the collection."""

    _run(FEED_CONTROLLER.saved, CollectionCommand(db_path=db_path))


@news_hub.command("history")
@_DB_PATH_OPTION
def history(db_path: Path | None) -> None:
    """List recently read stories, most recent first."""

    _run(FEED_CONTROLLER.history, CollectionCommand(db_path=db_path))


@news_hub.command("progress")
@_DB_PATH_OPTION
def progress(db_path: Path | None) -> None:
    """Show today's read count, daily goal, and streak."""

    _run(FEED_CONTROLLER.progress, CollectionCommand(db_path=db_path))


@news_hub.command("trending")
@_DB_PATH_OPTION
def trending(db_path: Path | None) -> None:
    """Show trending topics and title words."""

    _run(FEED_CONTROLLER.trending, CollectionCommand(db_path=db_path))


@news_hub.command("settings")
@_DB_PATH_OPTION
@click.option("--daily-goal", type=click.IntRange(min=1), default=None, help="Stories per day.")
@click.option("--hide", multiple=True, type=_CATEGORY_CHOICE, help="Hide a category section.")
@click.option("--show", multiple=True, type=_CATEGORY_CHOICE, help="Show a hidden section.")
@click.option(
    "--layout",
    type=click.Choice([mode.value for mode in LayoutMode]),
    default=None,
    help="Story layout.",
)
@click.option(
    "--font-size",
    type=click.Choice([size.value for size in FontSize]),
    default=None,
    help="Reading font size.",
)
@click.option("--dark-mode/--light-mode", default=None, help="Color scheme.")
def settings(  # noqa: PLR0913
    db_path: Path | None,
    daily_goal: int | None,
    hide: tuple[str, ...],
    show: tuple[str, ...],
    layout: str | None,
    font_size: str | None,
    dark_mode: bool | None,
) -> None:
    """Show preferences, updating any that are given."""

    _run(
        FEED_CONTROLLER.settings,
        SettingsCommand(
            db_path=db_path,
            daily_goal=daily_goal,
            hide=tuple(Category(value) for value in hide),
            show=tuple(Category(value) for value in show),
            layout=LayoutMode(layout) if layout else None,
            font_size=FontSize(font_size) if font_size else None,
            dark_mode=dark_mode,
        ),
    )


def _run(handler: Callable[[Any], list[str]], command: object) -> None:
    try:
        lines = handler(command)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    _emit_lines(lines)


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    news_hub()
