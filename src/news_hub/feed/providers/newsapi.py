"""NewsAPI top-headlines normalizer; one request per mapped outlet."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from news_hub.config import ProviderSettings
from news_hub.feed.models import Story
from news_hub.feed.normalization import build_story
from news_hub.feed.providers.base import (
    ProviderJob,
    ProviderUnavailable,
    require_list,
    require_mapping,
    text_field,
)

PROVIDER_ID = "newsapi"
logger = logging.getLogger(__name__)


def build_jobs(settings: ProviderSettings, sources: Mapping[str, str]) -> list[ProviderJob]:
    return [
        ProviderJob(
            provider_id=PROVIDER_ID,
            label=outlet_name,
            url=settings.news_api_base_url,
            params={"sources": source_id, "apiKey": settings.news_api_key},
        )
        for outlet_name, source_id in sources.items()
    ]


def parse_payload(payload: object, *, source: str) -> list[Story]:
    body = require_mapping(payload, provider_id=PROVIDER_ID, what="response")
    status = body.get("status")
    if status == "error":
        raise ProviderUnavailable(
            message=f"{PROVIDER_ID} error for {source}: {body.get('message')}",
            code=str(body.get("code") or "api_error"),
            provider_id=PROVIDER_ID,
        )
    if status != "ok" or not body.get("articles"):
        raise ProviderUnavailable(
            message=f"{source}: no articles returned",
            code="empty",
            provider_id=PROVIDER_ID,
        )
    articles = require_list(body.get("articles"), provider_id=PROVIDER_ID, what="articles")

    stories: list[Story] = []
    for item in articles:
        if not isinstance(item, Mapping):
            continue
        title = text_field(item, "title")
        url = text_field(item, "url")
        if not title or not url:
            logger.debug("Skipping %s article without title/url", source)
            continue
        stories.append(
            build_story(
                source=source,
                title=title,
                description=text_field(item, "description"),
                published=item.get("publishedAt"),
                url=url,
                image=item.get("urlToImage"),
            ),
        )
    return stories
