from __future__ import annotations

import allure
import pytest

from news_hub.feed.classifier import (
    categorize_section,
    classify,
    match_categories,
    primary_category,
)
from news_hub.feed.models import Category

pytestmark = [
    allure.epic("Feed Aggregation"),
    allure.feature("Topic Classification"),
]


@pytest.mark.parametrize(
    ("section", "expected"),
    [
        ("U.S. Politics", Category.POLITICS),
        ("us-news", Category.POLITICS),
        ("Business Day", Category.BUSINESS),
        ("Technology", Category.TECHNOLOGY),
        ("Sport", Category.SPORTS),
        ("Health", Category.HEALTH),
        ("Environment", Category.SCIENCE),
        ("Arts", Category.ENTERTAINMENT),
        ("Travel", Category.LIFESTYLE),
        ("Opinion", Category.WORLD),
    ],
)
def test_categorize_section_maps_known_labels(section: str, expected: Category) -> None:
    assert categorize_section(section) == expected


def test_categorize_section_empty_or_missing_is_world() -> None:
    assert categorize_section("") == Category.WORLD
    assert categorize_section(None) == Category.WORLD


def test_categorize_section_first_rule_in_priority_order_wins() -> None:
    assert categorize_section("Sport science") == Category.SPORTS
    assert categorize_section("Government finance") == Category.POLITICS


def test_classify_returns_all_matches_in_priority_order() -> None:
    categories = classify("Tech giant Apple reports record earnings")

    assert categories == (Category.BUSINESS, Category.TECHNOLOGY)
    assert primary_category("Tech giant Apple reports record earnings") == Category.BUSINESS


@pytest.mark.parametrize(
    "text",
    [
        "Tech giant Apple reports record earnings",
        "Tech giant Apple unveils new AI chip amid market rally",
    ],
)
def test_business_outranks_technology(text: str) -> None:
    assert classify(text) == (Category.BUSINESS, Category.TECHNOLOGY)
    assert primary_category(text) == Category.BUSINESS


def test_classify_single_match() -> None:
    assert classify("Senate passes budget bill") == (Category.POLITICS,)


def test_classify_without_match_is_exactly_world() -> None:
    assert classify("Quiet weekend ahead") == (Category.WORLD,)
    assert classify("") == (Category.WORLD,)
    assert classify(None) == (Category.WORLD,)


def test_match_categories_is_empty_without_match() -> None:
    assert match_categories("Quiet weekend ahead") == ()
    assert match_categories("") == ()


def test_classification_is_case_insensitive() -> None:
    assert classify("NASA RESEARCH") == (Category.SCIENCE,)


def test_keywords_match_inside_longer_words() -> None:
    # "said" contains "ai"
    assert classify("He said hello") == (Category.TECHNOLOGY,)
