"""Guardian content API normalizer."""

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

PROVIDER_ID = "guardian"
SOURCE_NAME = "The Guardian"
logger = logging.getLogger(__name__)


def build_job(settings: ProviderSettings) -> ProviderJob:
    return ProviderJob(
        provider_id=PROVIDER_ID,
        label=SOURCE_NAME,
        url=settings.guardian_base_url,
        params={
            "api-key": settings.guardian_api_key,
            "show-fields": "headline,trailText,thumbnail",
            "page-size": str(settings.guardian_page_size),
        },
    )


def parse_payload(payload: object, *, source: str = SOURCE_NAME) -> list[Story]:
    body = require_mapping(payload, provider_id=PROVIDER_ID, what="payload")
    response = require_mapping(body.get("response"), provider_id=PROVIDER_ID, what="response")
    if response.get("status") != "ok":
        raise ProviderUnavailable(
            message=f"{PROVIDER_ID}: API status {response.get('status')!r}",
            code="api_error",
            provider_id=PROVIDER_ID,
        )
    results = require_list(response.get("results"), provider_id=PROVIDER_ID, what="results")

    stories: list[Story] = []
    for item in results:
        if not isinstance(item, Mapping):
            continue
        fields = item.get("fields")
        fields = fields if isinstance(fields, Mapping) else {}
        title = text_field(fields, "headline") or text_field(item, "webTitle")
        url = text_field(item, "webUrl")
        if not title or not url:
            logger.debug("Skipping Guardian item without title/url: %r", item.get("id"))
            continue
        stories.append(
            build_story(
                source=source,
                title=title,
                description=text_field(fields, "trailText"),
                published=item.get("webPublicationDate"),
                url=url,
                image=fields.get("thumbnail"),
                section=text_field(item, "sectionName"),
                use_section=True,
            ),
        )
    return stories
