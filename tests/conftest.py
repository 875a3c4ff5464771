"""Shared test fixtures."""

from __future__ import annotations

import os

import pytest

from news_hub.feed.models import Category, Story


class MemoryStore:
    """Dict-backed key-value store for tests."""

    def __init__(self) -> None:
        self.data: dict[str, object] = {}

    def get(self, key: str) -> object | None:
        return self.data.get(key)

    def set(self, key: str, value: object) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep developer ``NEWS_HUB_*`` variables (API keys included) out of tests."""
    for name in list(os.environ):
        if name.startswith("NEWS_HUB_"):
            monkeypatch.delenv(name)


@pytest.fixture()
def memory_store() -> MemoryStore:
    return MemoryStore()


def make_story(
    url: str,
    *,
    source: str = "CNN",
    title: str = "Quiet weekend ahead",
    timestamp: int = 1_700_000_000_000,
    category: Category = Category.WORLD,
    categories: tuple[Category, ...] | None = None,
    image: str | None = None,
) -> Story:
    return Story(
        source=source,
        title=title,
        description="",
        timestamp=timestamp,
        category=category,
        categories=categories or (category,),
        url=url,
        image=image,
        read_time="1 min read",
    )
