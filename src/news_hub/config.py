"""Runtime configuration for providers, refresh policy, and reading state."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

from news_hub.feed.models import Outlet

DEFAULT_OUTLETS: tuple[Outlet, ...] = (
    Outlet(name="CNN", url="https://cnn.com", color="#CC0000"),
    Outlet(name="Reuters", url="https://reuters.com", color="#FF6600"),
    Outlet(name="NPR", url="https://npr.org", color="#1A1A1A"),
    Outlet(name="NBC", url="https://nbcnews.com", color="#FFD700"),
    Outlet(name="ABC", url="https://abcnews.go.com", color="#FFD500"),
    Outlet(name="ESPN", url="https://espn.com", color="#D50A0A"),
    Outlet(name="AP News", url="https://apnews.com", color="#E41E13"),
    Outlet(name="NY Times", url="https://nytimes.com", color="#000000"),
    Outlet(name="WSJ", url="https://wsj.com", color="#2E2E2E"),
    Outlet(name="The Guardian", url="https://theguardian.com", color="#052962"),
)

DEFAULT_NEWS_API_SOURCES: dict[str, str] = {
    "CNN": "cnn",
    "Reuters": "reuters",
    "ABC": "abc-news",
    "NBC": "nbc-news",
    "ESPN": "espn",
    "WSJ": "the-wall-street-journal",
}


@dataclass(slots=True)
class ProviderSettings:
    """Credentials and query parameters for provider APIs."""

    nyt_api_key: str = ""
    guardian_api_key: str = ""
    news_api_key: str = ""
    nyt_limit: int = 20
    guardian_page_size: int = 20
    nyt_base_url: str = "https://api.nytimes.com/svc/news/v3/content/all/all.json"
    guardian_base_url: str = "https://content.guardianapis.com/search"
    news_api_base_url: str = "https://newsapi.org/v2/top-headlines"


@dataclass(slots=True)
class HttpSettings:
    """Transport settings shared by every provider request."""

    request_timeout_seconds: float = 30.0
    max_retries: int = 3


@dataclass(slots=True)
class RefreshSettings:
    """Manual refresh policy."""

    cooldown_seconds: int = 60


@dataclass(slots=True)
class ReadingSettings:
    """Reading tracker and placeholder defaults."""

    default_daily_goal: int = 10
    history_limit: int = 50
    placeholders_per_outlet: int = 5


@dataclass(slots=True)
class Settings:
    """Application settings grouped by domain concerns."""

    db_path: Path = Path(".news_hub.db")
    offline: bool = False
    providers: ProviderSettings = field(default_factory=ProviderSettings)
    http: HttpSettings = field(default_factory=HttpSettings)
    refresh: RefreshSettings = field(default_factory=RefreshSettings)
    reading: ReadingSettings = field(default_factory=ReadingSettings)
    outlets: tuple[Outlet, ...] = DEFAULT_OUTLETS
    news_api_sources: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_NEWS_API_SOURCES),
    )

    @classmethod
    def from_env(cls, db_path: Path | None = None) -> Settings:
        """Load settings from environment with sane defaults for local development."""

        return cls(
            db_path=db_path or Path(os.getenv("NEWS_HUB_DB_PATH", ".news_hub.db")),
            offline=_env_bool("NEWS_HUB_OFFLINE", default=False),
            providers=ProviderSettings(
                nyt_api_key=os.getenv("NEWS_HUB_NYT_API_KEY", "").strip(),
                guardian_api_key=os.getenv("NEWS_HUB_GUARDIAN_API_KEY", "").strip(),
                news_api_key=os.getenv("NEWS_HUB_NEWS_API_KEY", "").strip(),
                nyt_limit=int(os.getenv("NEWS_HUB_NYT_LIMIT", "20")),
                guardian_page_size=int(os.getenv("NEWS_HUB_GUARDIAN_PAGE_SIZE", "20")),
            ),
            http=HttpSettings(
                request_timeout_seconds=float(
                    os.getenv("NEWS_HUB_REQUEST_TIMEOUT_SECONDS", "30.0"),
                ),
                max_retries=int(os.getenv("NEWS_HUB_MAX_RETRIES", "3")),
            ),
            refresh=RefreshSettings(
                cooldown_seconds=int(os.getenv("NEWS_HUB_REFRESH_COOLDOWN_SECONDS", "60")),
            ),
            reading=ReadingSettings(
                default_daily_goal=int(os.getenv("NEWS_HUB_DAILY_GOAL", "10")),
                history_limit=int(os.getenv("NEWS_HUB_HISTORY_LIMIT", "50")),
                placeholders_per_outlet=int(
                    os.getenv("NEWS_HUB_PLACEHOLDERS_PER_OUTLET", "5"),
                ),
            ),
            news_api_sources=_collect_news_api_sources(),
        )

    def validate(self) -> None:
        """Raise configuration error for values the pipeline cannot work with."""

        if self.reading.default_daily_goal <= 0:
            raise ValueError("NEWS_HUB_DAILY_GOAL must be > 0.")
        if self.reading.history_limit <= 0:
            raise ValueError("NEWS_HUB_HISTORY_LIMIT must be > 0.")
        if self.reading.placeholders_per_outlet <= 0:
            raise ValueError("NEWS_HUB_PLACEHOLDERS_PER_OUTLET must be > 0.")
        if self.refresh.cooldown_seconds < 0:
            raise ValueError("NEWS_HUB_REFRESH_COOLDOWN_SECONDS must be >= 0.")
        if self.http.request_timeout_seconds <= 0:
            raise ValueError("NEWS_HUB_REQUEST_TIMEOUT_SECONDS must be > 0.")
        if self.http.max_retries < 0:
            raise ValueError("NEWS_HUB_MAX_RETRIES must be >= 0.")

        outlet_names = {outlet.name for outlet in self.outlets}
        for outlet in self.outlets:
            _validate_homepage_url(outlet.url)
        for outlet_name in self.news_api_sources:
            if outlet_name not in outlet_names:
                raise ValueError(
                    f"NewsAPI source mapped to unknown outlet: {outlet_name!r}",
                )


def _collect_news_api_sources() -> dict[str, str]:
    """Parse ``NEWS_HUB_NEWS_API_SOURCES`` as ``Outlet|source-id`` pairs."""

    raw = os.getenv("NEWS_HUB_NEWS_API_SOURCES", "").strip()
    if not raw:
        return dict(DEFAULT_NEWS_API_SOURCES)

    sources: dict[str, str] = {}
    for part in raw.split(","):
        token = part.strip()
        if not token:
            continue
        if "|" not in token:
            raise ValueError(
                "Invalid NEWS_HUB_NEWS_API_SOURCES entry: "
                f"{token!r}. Expected format '<outlet name>|<source id>'.",
            )
        outlet_name, source_id = token.rsplit("|", 1)
        outlet_name = outlet_name.strip()
        source_id = source_id.strip()
        if not outlet_name or not source_id:
            raise ValueError(f"Invalid NEWS_HUB_NEWS_API_SOURCES entry: {token!r}")
        sources[outlet_name] = source_id
    return sources


def _validate_homepage_url(value: str) -> None:
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError(
            "Invalid outlet homepage URL: "
            f"{value!r}. Expected an absolute URL with http:// or https:// scheme.",
        )


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
