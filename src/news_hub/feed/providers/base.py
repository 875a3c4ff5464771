"""Common provider contracts and error taxonomy."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

from news_hub.feed.models import Story
from news_hub.http.fetcher import FetchResult


@dataclass(slots=True)
class ProviderError(Exception):
    """Base provider fetch/normalization error."""

    message: str
    code: str = "provider_error"

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class ProviderUnavailable(ProviderError):
    """Provider yielded no usable payload: transport, status, or shape problem."""

    provider_id: str = ""


@dataclass(frozen=True, slots=True)
class ProviderJob:
    """One provider request within an aggregation pass."""

    provider_id: str
    label: str
    url: str
    params: dict[str, str] = field(default_factory=dict)


class PayloadNormalizer(Protocol):
    """Converts one raw provider payload into canonical stories."""

    def __call__(self, payload: object, *, source: str) -> list[Story]:
        raise NotImplementedError


class JsonClient(Protocol):
    """Transport contract used by provider collection."""

    def get_json(self, url: str, *, params: dict[str, str] | None = None) -> FetchResult:
        raise NotImplementedError


def require_mapping(value: object, *, provider_id: str, what: str) -> Mapping[str, object]:
    if not isinstance(value, Mapping):
        raise ProviderUnavailable(
            message=f"{provider_id}: expected object for {what}, got {type(value).__name__}",
            code="malformed_payload",
            provider_id=provider_id,
        )
    return value


def require_list(value: object, *, provider_id: str, what: str) -> list[object]:
    if not isinstance(value, list):
        raise ProviderUnavailable(
            message=f"{provider_id}: expected list for {what}, got {type(value).__name__}",
            code="malformed_payload",
            provider_id=provider_id,
        )
    return value


def text_field(item: Mapping[str, object], key: str) -> str:
    value = item.get(key)
    return value.strip() if isinstance(value, str) else ""
