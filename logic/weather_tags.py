"""Translate raw weather readings into the weather tags outfits are labelled with."""

from __future__ import annotations

from typing import Iterable, List, Optional

HOT_FROM = 30.0
WARM_FROM = 20.0
COOL_FROM = 10.0

_DESCRIPTION_KEYWORDS = (
    ("rainy", ("rain", "drizzle", "thunderstorm", "shower")),
    ("snowy", ("snow", "sleet", "hail")),
    ("sunny", ("clear", "sun")),
    ("cloudy", ("cloud", "overcast", "fog", "mist")),
    ("windy", ("wind", "gust", "squall")),
)


def temperature_tag(temperature: float) -> str:
    if temperature >= HOT_FROM:
        return "hot"
    if temperature >= WARM_FROM:
        return "warm"
    if temperature >= COOL_FROM:
        return "cool"
    return "cold"


def weather_tags_for(temperature: Optional[float], conditions: Iterable[str] = ()) -> List[str]:
    """Temperature band first, then any precipitation tags."""

    tags: List[str] = []
    if temperature is not None:
        tags.append(temperature_tag(temperature))
    conditions = set(conditions)
    if "rainy" in conditions:
        tags.append("rainy")
    if "snowy" in conditions:
        tags.append("snowy")
    return tags


def conditions_from_description(description: str) -> List[str]:
    """Map a provider's free-text description onto weather conditions."""

    text = (description or "").lower()
    return [condition for condition, keywords in _DESCRIPTION_KEYWORDS if any(word in text for word in keywords)]


__all__ = ["conditions_from_description", "temperature_tag", "weather_tags_for"]
