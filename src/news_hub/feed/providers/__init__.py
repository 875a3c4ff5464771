"""Provider normalizers behind one ``normalize`` capability."""

from news_hub.feed.providers.base import ProviderError, ProviderJob, ProviderUnavailable
from news_hub.feed.providers.registry import NORMALIZERS, build_jobs, collect_results, normalize

__all__ = [
    "NORMALIZERS",
    "ProviderError",
    "ProviderJob",
    "ProviderUnavailable",
    "build_jobs",
    "collect_results",
    "normalize",
]
