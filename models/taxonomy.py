"""Canonical vocabularies for wardrobe items, outfits and style preferences.

Every tag-like field in the domain is a plain lower-case string drawn from one
of the lists below. The helpers keep validation consistent across the models,
the recommendation logic and the API schemas.
"""

from typing import Iterable, List


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return str(value).strip().lower().replace(" ", "_")


CATEGORIES: List[str] = ["tops", "bottoms", "dresses", "outerwear", "shoes", "accessories"]
TOP_CAPABLE = {"tops", "dresses"}
BOTTOM_CAPABLE = {"bottoms", "dresses"}

STYLE_TAGS = ["casual", "formal", "business", "sporty", "elegant", "vintage", "modern"]
WEATHER_TAGS = ["hot", "warm", "cool", "cold", "rainy", "snowy"]
WEATHER_CONDITIONS = ["rainy", "snowy", "sunny", "cloudy", "windy"]
SEASONS = ["spring", "summer", "fall", "winter"]
OCCASIONS = ["casual", "work", "formal", "athletic", "vacation", "special"]
FIT_TYPES = ["tight", "slim", "regular", "relaxed", "oversized"]

FEEDBACK_RESPONSES = ["liked", "disliked", "tried", "purchased", "saved", "ignored"]
RECOMMENDATION_TYPES = ["outfit", "item", "style", "brand", "color"]


def _validate(value: str, allowed: List[str], label: str) -> str:
    key = _normalize_key(value)
    if key not in allowed:
        raise ValueError(f"Unsupported {label} '{value}'. Allowed: {allowed}")
    return key


def validate_category(value: str) -> str:
    """Validate and normalise a clothing category.

    Raises a :class:`ValueError` if the category is not part of the canonical
    taxonomy.
    """

    return _validate(value, CATEGORIES, "category")


def validate_season(value: str) -> str:
    return _validate(value, SEASONS, "season")


def validate_occasion(value: str) -> str:
    return _validate(value, OCCASIONS, "occasion")


def validate_fit_type(value: str) -> str:
    return _validate(value, FIT_TYPES, "fit type")


def validate_response(value: str) -> str:
    return _validate(value, FEEDBACK_RESPONSES, "feedback response")


def validate_recommendation_type(value: str) -> str:
    return _validate(value, RECOMMENDATION_TYPES, "recommendation type")


def validate_tags(values: Iterable[str], allowed: List[str], label: str = "tag") -> List[str]:
    """Validate, normalise and deduplicate tags, keeping first-seen order."""

    validated: List[str] = []
    for value in values or []:
        key = _validate(value, allowed, label)
        if key not in validated:
            validated.append(key)
    return validated


def normalise_tags(values: Iterable[str], allowed: List[str]) -> List[str]:
    """Normalise and deduplicate tags, silently dropping unknown values."""

    normalised = []
    seen = set()
    for value in values or []:
        key = _normalize_key(value)
        if key in allowed and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


__all__ = [
    "CATEGORIES",
    "TOP_CAPABLE",
    "BOTTOM_CAPABLE",
    "STYLE_TAGS",
    "WEATHER_TAGS",
    "WEATHER_CONDITIONS",
    "SEASONS",
    "OCCASIONS",
    "FIT_TYPES",
    "FEEDBACK_RESPONSES",
    "RECOMMENDATION_TYPES",
    "validate_category",
    "validate_season",
    "validate_occasion",
    "validate_fit_type",
    "validate_response",
    "validate_recommendation_type",
    "validate_tags",
    "normalise_tags",
]
