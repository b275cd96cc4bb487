"""Deterministic scoring for candidate outfits."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Optional

from models.outfit import Outfit
from models.style_preference import StylePreference

WEIGHTS = {
    "weather": 2.0,
    "style": 1.5,
    "color": 1.0,
    "brand": 0.8,
}
RECENCY_PER_DAY = 0.1
RECENCY_CAP = 1.0
WEAR_PENALTY_PER_WEAR = 0.1
FAVORITE_BONUS = 1.0
ACCEPTANCE_THRESHOLD = 0.6


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-factor contributions; ``total`` is their plain sum."""

    weather: float
    style: float
    color: float
    brand: float
    recency: float
    wear: float
    favorite: float

    @property
    def total(self) -> float:
        return self.weather + self.style + self.color + self.brand + self.recency + self.wear + self.favorite

    def as_dict(self) -> Dict[str, float]:
        return {
            "weather": self.weather,
            "style": self.style,
            "color": self.color,
            "brand": self.brand,
            "recency": self.recency,
            "wear": self.wear,
            "favorite": self.favorite,
            "total": self.total,
        }


def _days_since(last_worn: datetime, now: datetime) -> int:
    return max((now - last_worn).days, 0)


def _recency_bonus(outfit: Outfit, now: datetime) -> float:
    if outfit.last_worn is None:
        return 0.0
    return min(_days_since(outfit.last_worn, now) * RECENCY_PER_DAY, RECENCY_CAP)


def score_breakdown(
    outfit: Outfit,
    weather_tags: Iterable[str],
    preference: StylePreference,
    now: Optional[datetime] = None,
) -> ScoreBreakdown:
    """Calculate every scoring factor for ``outfit``."""

    now = now or datetime.now()
    weather_matches = set(outfit.weather_tags) & set(weather_tags)
    style_matches = set(outfit.style_tags) & set(preference.favorite_styles)
    color_matches = set(outfit.colors) & set(preference.favorite_colors)
    brand_matches = set(outfit.brands) & set(preference.favored_brands)

    return ScoreBreakdown(
        weather=WEIGHTS["weather"] * len(weather_matches),
        style=WEIGHTS["style"] * len(style_matches),
        color=WEIGHTS["color"] * len(color_matches),
        brand=WEIGHTS["brand"] * len(brand_matches),
        recency=_recency_bonus(outfit, now),
        wear=max(0.0, 1.0 - outfit.wear_count * WEAR_PENALTY_PER_WEAR),
        favorite=FAVORITE_BONUS if outfit.favorite else 0.0,
    )


def score_outfit(
    outfit: Outfit,
    weather_tags: Iterable[str],
    preference: StylePreference,
    now: Optional[datetime] = None,
) -> float:
    """Return the additive desirability score for ``outfit``."""

    return score_breakdown(outfit, weather_tags, preference, now=now).total


def qualifies(outfit: Outfit, score: float, threshold: float = ACCEPTANCE_THRESHOLD) -> bool:
    """Whether an existing outfit may be offered as a recommendation."""

    return outfit.is_valid and score > threshold


__all__ = [
    "ACCEPTANCE_THRESHOLD",
    "FAVORITE_BONUS",
    "RECENCY_CAP",
    "RECENCY_PER_DAY",
    "WEAR_PENALTY_PER_WEAR",
    "WEIGHTS",
    "ScoreBreakdown",
    "qualifies",
    "score_breakdown",
    "score_outfit",
]
