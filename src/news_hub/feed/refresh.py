"""Manual refresh gating: cooldown and single in-flight refresh."""

from __future__ import annotations

import math
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from news_hub.feed.models import now_ms


class RefreshRejected(Exception):
    """A manual refresh request was not started."""


class RateLimitedRefresh(RefreshRejected):
    """Refresh requested before the cooldown elapsed."""

    def __init__(self, wait_seconds: int) -> None:
        super().__init__(f"Please wait {wait_seconds} seconds before refreshing again")
        self.wait_seconds = wait_seconds


class ConcurrentRefreshRejected(RefreshRejected):
    """Refresh requested while another one is running."""

    def __init__(self) -> None:
        super().__init__("A refresh is already in progress")


class RefreshGate:
    """Admits a manual refresh at most once per cooldown window.

    The cooldown runs from the completion of the last successful refresh.
    A rejected request does not restart it.
    """

    def __init__(
        self,
        *,
        cooldown_seconds: int = 60,
        last_refresh_ms: int | None = None,
        clock_ms: Callable[[], int] = now_ms,
    ) -> None:
        self.cooldown_ms = cooldown_seconds * 1000
        self.last_refresh_ms = last_refresh_ms
        self._clock_ms = clock_ms
        self._lock = threading.Lock()

    @property
    def in_progress(self) -> bool:
        return self._lock.locked()

    def wait_seconds(self) -> int:
        """Whole seconds until the next refresh is allowed, 0 when allowed now."""

        if self.last_refresh_ms is None:
            return 0
        elapsed = self._clock_ms() - self.last_refresh_ms
        if elapsed >= self.cooldown_ms:
            return 0
        return math.ceil((self.cooldown_ms - elapsed) / 1000)

    @contextmanager
    def acquire(self) -> Iterator[None]:
        """Hold the refresh slot; completion is recorded only on success."""

        if not self._lock.acquire(blocking=False):
            raise ConcurrentRefreshRejected()
        try:
            wait = self.wait_seconds()
            if wait > 0:
                raise RateLimitedRefresh(wait)
            yield
            self.last_refresh_ms = self._clock_ms()
        finally:
            self._lock.release()
