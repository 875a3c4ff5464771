from __future__ import annotations

import allure
import pytest

from conftest import MemoryStore
from news_hub.config import ProviderSettings, Settings
from news_hub.feed.models import Outlet
from news_hub.feed.pipeline import FeedPipeline
from news_hub.feed.refresh import (
    ConcurrentRefreshRejected,
    RateLimitedRefresh,
    RefreshGate,
    RefreshRejected,
)
from news_hub.http.fetcher import FetchResult
from news_hub.state.storage import FEED_SNAPSHOT_KEY, LAST_REFRESH_KEY

pytestmark = [
    allure.epic("Feed Aggregation"),
    allure.feature("Refresh Policy"),
]

START_MS = 1_705_312_800_000


class _Clock:
    def __init__(self, value: int = START_MS) -> None:
        self.value = value

    def __call__(self) -> int:
        return self.value


def test_first_refresh_is_always_allowed() -> None:
    gate = RefreshGate(clock_ms=_Clock())

    assert gate.wait_seconds() == 0
    with gate.acquire():
        assert gate.in_progress

    assert not gate.in_progress
    assert gate.last_refresh_ms == START_MS


def test_refresh_inside_cooldown_reports_rounded_up_wait() -> None:
    clock = _Clock()
    gate = RefreshGate(cooldown_seconds=60, last_refresh_ms=START_MS, clock_ms=clock)

    clock.value = START_MS + 30_000
    with pytest.raises(RateLimitedRefresh) as excinfo, gate.acquire():
        pass
    assert excinfo.value.wait_seconds == 30
    assert "30 seconds" in str(excinfo.value)

    clock.value = START_MS + 59_500
    assert gate.wait_seconds() == 1

    clock.value = START_MS + 60_000
    assert gate.wait_seconds() == 0


def test_rejected_refresh_does_not_restart_cooldown() -> None:
    clock = _Clock(START_MS + 10_000)
    gate = RefreshGate(last_refresh_ms=START_MS, clock_ms=clock)

    with pytest.raises(RefreshRejected), gate.acquire():
        pass

    assert gate.last_refresh_ms == START_MS


def test_concurrent_refresh_is_rejected_not_queued() -> None:
    gate = RefreshGate(clock_ms=_Clock())

    with gate.acquire():
        with pytest.raises(ConcurrentRefreshRejected), gate.acquire():
            pass


def test_failed_pass_does_not_count_as_completed() -> None:
    gate = RefreshGate(clock_ms=_Clock())

    with pytest.raises(RuntimeError), gate.acquire():
        raise RuntimeError("boom")

    assert gate.last_refresh_ms is None
    assert not gate.in_progress


_CNN_PAYLOAD = {
    "status": "ok",
    "articles": [
        {
            "title": "Senate passes budget bill",
            "description": "",
            "url": "https://cnn.example/budget",
            "publishedAt": "2024-01-15T09:00:00Z",
        },
    ],
}


class _CnnClient:
    def __init__(self) -> None:
        self.calls = 0

    def get_json(self, url: str, *, params: dict[str, str] | None = None) -> FetchResult:
        self.calls += 1
        return FetchResult(url=url, status_code=200, payload=_CNN_PAYLOAD, is_success=True)


def _settings(**kwargs) -> Settings:
    return Settings(
        providers=ProviderSettings(news_api_key="key"),
        outlets=(
            Outlet(name="CNN", url="https://cnn.com"),
            Outlet(name="NPR", url="https://npr.org"),
        ),
        news_api_sources={"CNN": "cnn"},
        **kwargs,
    )


def test_refresh_aggregates_and_persists_snapshot(memory_store: MemoryStore) -> None:
    client = _CnnClient()
    pipeline = FeedPipeline(
        settings=_settings(),
        store=memory_store,
        client=client,
        clock_ms=_Clock(),
    )

    state = pipeline.refresh()

    assert client.calls == 1
    assert [story.url for story in state.stories] == [
        "https://npr.org",
        "https://cnn.example/budget",
    ]
    assert state.refreshed_at_ms == START_MS
    assert not state.from_cache
    assert memory_store.get(LAST_REFRESH_KEY) == START_MS
    assert len(memory_store.get(FEED_SNAPSHOT_KEY)) == 2  # type: ignore[arg-type]


def test_cooldown_survives_a_new_pipeline(memory_store: MemoryStore) -> None:
    clock = _Clock()
    FeedPipeline(
        settings=_settings(),
        store=memory_store,
        client=_CnnClient(),
        clock_ms=clock,
    ).refresh()

    clock.value = START_MS + 45_000
    client = _CnnClient()
    pipeline = FeedPipeline(settings=_settings(), store=memory_store, client=client, clock_ms=clock)

    with pytest.raises(RateLimitedRefresh) as excinfo:
        pipeline.refresh()

    assert excinfo.value.wait_seconds == 15
    assert client.calls == 0
    cached = pipeline.load_cached()
    assert cached.from_cache
    assert [story.url for story in cached.stories] == [
        "https://npr.org",
        "https://cnn.example/budget",
    ]


def test_load_cached_without_snapshot_serves_placeholders(memory_store: MemoryStore) -> None:
    pipeline = FeedPipeline(settings=_settings(), store=memory_store, clock_ms=_Clock())

    state = pipeline.load_cached()

    assert [story.url for story in state.stories] == ["https://cnn.com", "https://npr.org"]


def test_offline_mode_never_calls_providers(memory_store: MemoryStore) -> None:
    client = _CnnClient()
    pipeline = FeedPipeline(
        settings=_settings(offline=True),
        store=memory_store,
        client=client,
        clock_ms=_Clock(),
    )

    state = pipeline.refresh()

    assert client.calls == 0
    assert state.from_cache
    assert memory_store.get(LAST_REFRESH_KEY) is None
