"""Stateful shell around one aggregation pass and the cached collection."""

from __future__ import annotations

import logging
from collections.abc import Callable

from news_hub.config import Settings
from news_hub.feed.aggregator import aggregate
from news_hub.feed.models import AppState, Story, now_ms
from news_hub.feed.providers import build_jobs, collect_results
from news_hub.feed.providers.base import JsonClient
from news_hub.feed.refresh import RefreshGate
from news_hub.http.fetcher import HttpFetcher
from news_hub.state.storage import FEED_SNAPSHOT_KEY, LAST_REFRESH_KEY, KeyValueStore

logger = logging.getLogger(__name__)


class FeedPipeline:
    """Owns the current ``AppState`` and replaces it wholesale after each pass."""

    def __init__(
        self,
        *,
        settings: Settings,
        store: KeyValueStore,
        client: JsonClient | None = None,
        clock_ms: Callable[[], int] = now_ms,
    ) -> None:
        self.settings = settings
        self.store = store
        self.client = client
        self._clock_ms = clock_ms
        last_refresh = store.get(LAST_REFRESH_KEY)
        self.gate = RefreshGate(
            cooldown_seconds=settings.refresh.cooldown_seconds,
            last_refresh_ms=last_refresh if isinstance(last_refresh, int) else None,
            clock_ms=clock_ms,
        )
        self.state = AppState()

    def refresh(self) -> AppState:
        """Run a gated aggregation pass.

        Raises ``RefreshRejected`` subclasses when the gate refuses; the
        current state is left untouched in that case.
        """

        if self.settings.offline:
            logger.info("Offline mode; serving cached collection")
            return self.load_cached()

        with self.gate.acquire():
            stories = self._run_pass()
        self.state = AppState(
            stories=tuple(stories),
            refreshed_at_ms=self.gate.last_refresh_ms,
            from_cache=False,
        )
        self.store.set(FEED_SNAPSHOT_KEY, [story.to_dict() for story in stories])
        self.store.set(LAST_REFRESH_KEY, self.gate.last_refresh_ms)
        return self.state

    def load_cached(self) -> AppState:
        """Serve the persisted collection, or placeholders when there is none."""

        stories = _decode_snapshot(self.store.get(FEED_SNAPSHOT_KEY))
        if not stories:
            stories = aggregate(
                [],
                self.settings.outlets,
                now_ms=self._clock_ms(),
                placeholders_per_outlet=self.settings.reading.placeholders_per_outlet,
            )
        self.state = AppState(
            stories=tuple(stories),
            refreshed_at_ms=self.gate.last_refresh_ms,
            from_cache=True,
        )
        return self.state

    def _run_pass(self) -> list[Story]:
        jobs = build_jobs(self.settings)
        if self.client is not None:
            results = collect_results(jobs, self.client)
        else:
            with HttpFetcher(
                timeout_seconds=self.settings.http.request_timeout_seconds,
                max_retries=self.settings.http.max_retries,
            ) as fetcher:
                results = collect_results(jobs, fetcher)

        return aggregate(
            [result.stories for result in results],
            self.settings.outlets,
            now_ms=self._clock_ms(),
            placeholders_per_outlet=self.settings.reading.placeholders_per_outlet,
        )


def _decode_snapshot(value: object) -> list[Story]:
    if not isinstance(value, list):
        return []
    stories: list[Story] = []
    for item in value:
        if not isinstance(item, dict):
            continue
        try:
            stories.append(Story.from_dict(item))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping unreadable cached story: %s", exc)
    return stories
