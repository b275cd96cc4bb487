"""Style preference model with frequency-weighted list updates.

A :class:`StylePreference` is the learned profile the recommendation engine
scores against. Its ranked lists are rebuilt on every update by a 2:1 vote
between what was already preferred and what was just observed, and its scalar
``adventure_level`` moves through two distinct entry points:

* :meth:`StylePreference.update_adventure_level` blends an explicit sample
  into the current level (0.7 old / 0.3 new).
* :meth:`StylePreference.apply_feedback_delta` nudges the level additively
  according to a recommendation response.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Hashable, Iterable, List, Optional, Sequence, Tuple, TypeVar

from models.taxonomy import (
    STYLE_TAGS,
    validate_category,
    validate_fit_type,
    validate_response,
    validate_season,
    validate_tags,
)

T = TypeVar("T", bound=Hashable)

EXISTING_WEIGHT = 2
INCOMING_WEIGHT = 1
ADVENTURE_RETAIN = 0.7
ADVENTURE_SAMPLE = 0.3
DEFAULT_ADVENTURE_LEVEL = 0.5

# response -> (delta, bound); positive deltas cap at the bound, negative ones floor at it
FEEDBACK_DELTAS: Dict[str, Tuple[float, float]] = {
    "liked": (0.05, 1.0),
    "disliked": (-0.10, 0.1),
    "tried": (0.10, 1.0),
    "purchased": (0.10, 1.0),
    "saved": (0.03, 1.0),
    "ignored": (-0.02, 0.1),
}


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def merge_by_frequency(existing: Sequence[T], incoming: Iterable[T]) -> List[T]:
    """Re-rank values by a weighted vote between old and new observations.

    Every occurrence in ``existing`` counts twice, every occurrence in
    ``incoming`` once. Ties keep first-encounter order (existing before
    incoming).
    """

    weights: Dict[T, int] = {}
    for value in existing:
        weights[value] = weights.get(value, 0) + EXISTING_WEIGHT
    for value in incoming:
        weights[value] = weights.get(value, 0) + INCOMING_WEIGHT
    return [value for value, _ in sorted(weights.items(), key=lambda entry: -entry[1])]


@dataclass(frozen=True)
class FitPreference:
    """Preferred fit for a clothing category."""

    category: str
    fit_type: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", validate_category(self.category))
        object.__setattr__(self, "fit_type", validate_fit_type(self.fit_type))


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class StylePreference:
    """A user's learned style profile."""

    user_id: str
    preference_id: str = field(default_factory=_new_id)
    favorite_colors: List[str] = field(default_factory=list)
    favorite_styles: List[str] = field(default_factory=list)
    favored_brands: List[str] = field(default_factory=list)
    favored_fits: List[FitPreference] = field(default_factory=list)
    adventure_level: float = DEFAULT_ADVENTURE_LEVEL
    seasonal_preference: Dict[str, float] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        self.favorite_colors = [str(color).strip() for color in self.favorite_colors if str(color).strip()]
        self.favorite_styles = validate_tags(self.favorite_styles, STYLE_TAGS, "style tag")
        self.favored_brands = [str(brand).strip() for brand in self.favored_brands if str(brand).strip()]
        self.favored_fits = [
            fit if isinstance(fit, FitPreference) else FitPreference(**fit) for fit in self.favored_fits
        ]
        self.adventure_level = float(self.adventure_level)
        self.seasonal_preference = {
            validate_season(season): float(strength) for season, strength in self.seasonal_preference.items()
        }

    def update_preferences(
        self,
        new_colors: Optional[Iterable[str]] = None,
        new_styles: Optional[Iterable[str]] = None,
        new_brands: Optional[Iterable[str]] = None,
        new_fits: Optional[Iterable[FitPreference]] = None,
        now: Optional[datetime] = None,
    ) -> None:
        """Merge newly observed values into each ranked list that was provided."""

        if new_colors is not None:
            colors = [str(color).strip() for color in new_colors if str(color).strip()]
            self.favorite_colors = merge_by_frequency(self.favorite_colors, colors)
        if new_styles is not None:
            styles = validate_tags(list(new_styles), STYLE_TAGS, "style tag")
            self.favorite_styles = merge_by_frequency(self.favorite_styles, styles)
        if new_brands is not None:
            brands = [str(brand).strip() for brand in new_brands if str(brand).strip()]
            self.favored_brands = merge_by_frequency(self.favored_brands, brands)
        if new_fits is not None:
            self.favored_fits = merge_by_frequency(self.favored_fits, list(new_fits))
        self.updated_at = now or datetime.now()

    def update_adventure_level(self, sample: float, now: Optional[datetime] = None) -> float:
        """Blend ``sample`` into the current level and return the new level."""

        current = _clamp(self.adventure_level)
        self.adventure_level = _clamp(current * ADVENTURE_RETAIN + _clamp(float(sample)) * ADVENTURE_SAMPLE)
        self.updated_at = now or datetime.now()
        return self.adventure_level

    def apply_feedback_delta(self, response: str, now: Optional[datetime] = None) -> float:
        """Nudge the adventure level for a recommendation response."""

        delta, bound = FEEDBACK_DELTAS[validate_response(response)]
        level = _clamp(self.adventure_level) + delta
        level = min(level, bound) if delta > 0 else max(level, bound)
        # round away binary float noise so 0.5 - 0.1 lands on 0.4
        self.adventure_level = round(level, 10)
        self.updated_at = now or datetime.now()
        return self.adventure_level


__all__ = [
    "ADVENTURE_RETAIN",
    "ADVENTURE_SAMPLE",
    "FEEDBACK_DELTAS",
    "FitPreference",
    "StylePreference",
    "merge_by_frequency",
]
