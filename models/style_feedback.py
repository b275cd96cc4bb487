"""Feedback events recorded against recommendations."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from models.taxonomy import (
    WEATHER_TAGS,
    validate_occasion,
    validate_recommendation_type,
    validate_response,
    validate_tags,
)


@dataclass(frozen=True)
class FeedbackContext:
    """Snapshot of the situation the user responded in."""

    time: datetime = field(default_factory=datetime.now)
    weather: Optional[List[str]] = None
    occasion: Optional[str] = None

    def __post_init__(self) -> None:
        if self.weather is not None:
            object.__setattr__(self, "weather", validate_tags(self.weather, WEATHER_TAGS, "weather tag"))
        if self.occasion is not None:
            object.__setattr__(self, "occasion", validate_occasion(self.occasion))


@dataclass(frozen=True)
class StyleFeedback:
    """A single user response to a recommendation. Immutable once created."""

    recommendation_type: str
    response: str
    rating: int
    preference_id: str
    recommendation_id: Optional[str] = None
    context: FeedbackContext = field(default_factory=FeedbackContext)
    feedback_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        object.__setattr__(self, "recommendation_type", validate_recommendation_type(self.recommendation_type))
        object.__setattr__(self, "response", validate_response(self.response))
        if not 1 <= int(self.rating) <= 5:
            raise ValueError(f"Feedback rating must be between 1 and 5, got {self.rating}")
        object.__setattr__(self, "rating", int(self.rating))


__all__ = ["FeedbackContext", "StyleFeedback"]
