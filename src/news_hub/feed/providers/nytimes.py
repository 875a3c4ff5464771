"""New York Times newswire normalizer."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from news_hub.config import ProviderSettings
from news_hub.feed.models import Story
from news_hub.feed.normalization import build_story
from news_hub.feed.providers.base import (
    ProviderJob,
    require_list,
    require_mapping,
    text_field,
)

PROVIDER_ID = "nytimes"
SOURCE_NAME = "NY Times"
IMAGE_FORMAT = "Large Thumbnail"
logger = logging.getLogger(__name__)


def build_job(settings: ProviderSettings) -> ProviderJob:
    return ProviderJob(
        provider_id=PROVIDER_ID,
        label=SOURCE_NAME,
        url=settings.nyt_base_url,
        params={"api-key": settings.nyt_api_key, "limit": str(settings.nyt_limit)},
    )


def parse_payload(payload: object, *, source: str = SOURCE_NAME) -> list[Story]:
    body = require_mapping(payload, provider_id=PROVIDER_ID, what="response")
    results = require_list(body.get("results"), provider_id=PROVIDER_ID, what="results")

    stories: list[Story] = []
    for item in results:
        if not isinstance(item, Mapping):
            continue
        title = text_field(item, "title")
        url = text_field(item, "url")
        if not title or not url:
            logger.debug("Skipping NYT item without title/url: %r", item.get("slug_name"))
            continue
        stories.append(
            build_story(
                source=source,
                title=title,
                description=text_field(item, "abstract"),
                published=item.get("published_date"),
                url=url,
                image=_large_image(item.get("multimedia")),
                section=text_field(item, "section"),
                use_section=True,
            ),
        )
    return stories


def _large_image(multimedia: object) -> str | None:
    if not isinstance(multimedia, list):
        return None
    for media in multimedia:
        if isinstance(media, Mapping) and media.get("format") == IMAGE_FORMAT:
            url = media.get("url")
            return url if isinstance(url, str) and url else None
    return None
