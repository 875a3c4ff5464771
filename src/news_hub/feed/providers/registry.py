"""Provider selection, normalization dispatch, and soft-failing collection."""

from __future__ import annotations

import logging

from news_hub.config import Settings
from news_hub.feed.models import ProviderResult, Story
from news_hub.feed.providers import guardian, newsapi, nytimes
from news_hub.feed.providers.base import (
    JsonClient,
    PayloadNormalizer,
    ProviderError,
    ProviderJob,
    ProviderUnavailable,
)

logger = logging.getLogger(__name__)

NORMALIZERS: dict[str, PayloadNormalizer] = {
    nytimes.PROVIDER_ID: nytimes.parse_payload,
    guardian.PROVIDER_ID: guardian.parse_payload,
    newsapi.PROVIDER_ID: newsapi.parse_payload,
}


def normalize(provider_id: str, payload: object, *, source: str) -> list[Story]:
    """Normalize one raw payload, returning no stories when it is unusable."""

    try:
        return _dispatch(provider_id, payload, source=source)
    except ProviderError as exc:
        logger.warning("Provider %s (%s) unavailable: %s", provider_id, source, exc)
        return []


def build_jobs(settings: Settings) -> list[ProviderJob]:
    """Jobs for one pass: NYT, Guardian, then each NewsAPI-backed outlet."""

    providers = settings.providers
    jobs: list[ProviderJob] = []
    if providers.nyt_api_key:
        jobs.append(nytimes.build_job(providers))
    else:
        logger.info("NYT API key not configured; skipping %s", nytimes.SOURCE_NAME)
    if providers.guardian_api_key:
        jobs.append(guardian.build_job(providers))
    else:
        logger.info("Guardian API key not configured; skipping %s", guardian.SOURCE_NAME)
    if providers.news_api_key:
        jobs.extend(newsapi.build_jobs(providers, settings.news_api_sources))
    else:
        logger.info(
            "NewsAPI key not configured; skipping %d outlets",
            len(settings.news_api_sources),
        )
    return jobs


def collect_results(jobs: list[ProviderJob], client: JsonClient) -> list[ProviderResult]:
    """Run every job in order; a failing provider contributes an empty result."""

    results: list[ProviderResult] = []
    for job in jobs:
        result = ProviderResult(provider_id=job.provider_id, label=job.label)
        try:
            result.stories = _run_job(job, client)
        except ProviderError as exc:
            logger.warning("Provider %s (%s) unavailable: %s", job.provider_id, job.label, exc)
            result.error = str(exc)
        except Exception as exc:
            logger.exception("Provider %s (%s) failed unexpectedly", job.provider_id, job.label)
            result.error = f"unexpected error: {exc}"
        logger.info("%s loaded: %d", job.label, len(result.stories))
        results.append(result)
    return results


def _run_job(job: ProviderJob, client: JsonClient) -> list[Story]:
    fetched = client.get_json(job.url, params=job.params)
    if not fetched.is_success:
        raise ProviderUnavailable(
            message=f"{job.label}: {fetched.error or 'request failed'}",
            code=str(fetched.status_code or "transport"),
            provider_id=job.provider_id,
        )
    return _dispatch(job.provider_id, fetched.payload, source=job.label)


def _dispatch(provider_id: str, payload: object, *, source: str) -> list[Story]:
    normalizer = NORMALIZERS.get(provider_id)
    if normalizer is None:
        raise ValueError(f"Unknown provider: {provider_id}")
    return normalizer(payload, source=source)
