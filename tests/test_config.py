from __future__ import annotations

from pathlib import Path

import allure
import pytest

from news_hub.config import (
    DEFAULT_NEWS_API_SOURCES,
    ReadingSettings,
    RefreshSettings,
    Settings,
)
from news_hub.feed.models import Outlet

pytestmark = [
    allure.epic("Feed Aggregation"),
    allure.feature("Configuration"),
]


def test_from_env_defaults() -> None:
    settings = Settings.from_env()

    assert settings.db_path == Path(".news_hub.db")
    assert settings.offline is False
    assert settings.providers.nyt_api_key == ""
    assert settings.refresh.cooldown_seconds == 60
    assert settings.reading.default_daily_goal == 10
    assert settings.reading.history_limit == 50
    assert settings.news_api_sources == DEFAULT_NEWS_API_SOURCES
    assert len(settings.outlets) == 10
    settings.validate()


def test_from_env_reads_overrides(monkeypatch) -> None:
    monkeypatch.setenv("NEWS_HUB_DB_PATH", "/tmp/custom.db")
    monkeypatch.setenv("NEWS_HUB_OFFLINE", "yes")
    monkeypatch.setenv("NEWS_HUB_GUARDIAN_API_KEY", "  guardian-key  ")
    monkeypatch.setenv("NEWS_HUB_REFRESH_COOLDOWN_SECONDS", "15")
    monkeypatch.setenv("NEWS_HUB_DAILY_GOAL", "4")
    monkeypatch.setenv("NEWS_HUB_NEWS_API_SOURCES", "CNN|cnn, ESPN | espn")

    settings = Settings.from_env()

    assert settings.db_path == Path("/tmp/custom.db")
    assert settings.offline is True
    assert settings.providers.guardian_api_key == "guardian-key"
    assert settings.refresh.cooldown_seconds == 15
    assert settings.reading.default_daily_goal == 4
    assert settings.news_api_sources == {"CNN": "cnn", "ESPN": "espn"}


def test_explicit_db_path_wins_over_env(monkeypatch) -> None:
    monkeypatch.setenv("NEWS_HUB_DB_PATH", "/tmp/env.db")

    assert Settings.from_env(db_path=Path("cli.db")).db_path == Path("cli.db")


def test_invalid_boolean_is_rejected(monkeypatch) -> None:
    monkeypatch.setenv("NEWS_HUB_OFFLINE", "sometimes")

    with pytest.raises(ValueError, match="NEWS_HUB_OFFLINE"):
        Settings.from_env()


def test_malformed_news_api_source_entry_is_rejected(monkeypatch) -> None:
    monkeypatch.setenv("NEWS_HUB_NEWS_API_SOURCES", "CNN-cnn")

    with pytest.raises(ValueError, match="Expected format"):
        Settings.from_env()


@pytest.mark.parametrize(
    ("settings", "message"),
    [
        (Settings(reading=ReadingSettings(default_daily_goal=0)), "NEWS_HUB_DAILY_GOAL"),
        (Settings(reading=ReadingSettings(history_limit=0)), "NEWS_HUB_HISTORY_LIMIT"),
        (
            Settings(reading=ReadingSettings(placeholders_per_outlet=0)),
            "NEWS_HUB_PLACEHOLDERS_PER_OUTLET",
        ),
        (Settings(refresh=RefreshSettings(cooldown_seconds=-1)), "COOLDOWN_SECONDS"),
    ],
)
def test_validate_rejects_out_of_range_values(settings: Settings, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        settings.validate()


def test_validate_rejects_source_for_unknown_outlet() -> None:
    settings = Settings(news_api_sources={"BBC": "bbc-news"})

    with pytest.raises(ValueError, match="unknown outlet"):
        settings.validate()


def test_validate_rejects_relative_homepage() -> None:
    settings = Settings(outlets=(Outlet(name="CNN", url="cnn.com"),), news_api_sources={})

    with pytest.raises(ValueError, match="Invalid outlet homepage URL"):
        settings.validate()
