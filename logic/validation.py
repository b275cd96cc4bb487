"""Pydantic schemas and converters between API payloads and domain types."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from logic.recommendation import Recommendation
from logic.style_suggestions import StyleSuggestion
from models.clothing_item import ClothingItem
from models.outfit import Outfit
from models.style_board import StyleBoard
from models.style_feedback import FeedbackContext, StyleFeedback
from models.style_preference import FitPreference, StylePreference
from models.taxonomy import WEATHER_TAGS, validate_tags

# Letters, digits, underscore, hyphen and dot; never a leading dot.
USER_ID_PATTERN = r"^[A-Za-z0-9_-][A-Za-z0-9_.-]*$"


def _weather_tags(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    return validate_tags(values, WEATHER_TAGS, "weather tag")


class ItemPayload(BaseModel):
    """Wire shape of a clothing item."""

    item_id: Optional[str] = None
    name: str = Field(min_length=1)
    category: str
    color: str = Field(min_length=1)
    brand: Optional[str] = None
    subcategory: Optional[str] = None
    size: Optional[str] = None
    notes: Optional[str] = None
    min_temperature: Optional[float] = None
    max_temperature: Optional[float] = None
    conditions: List[str] = []
    style_tags: List[str] = []
    wear_count: int = Field(default=0, ge=0)
    last_worn: Optional[datetime] = None
    favorite: bool = False

    def to_domain(self) -> ClothingItem:
        data = self.model_dump(exclude_none=True)
        return ClothingItem(**data)

    @classmethod
    def from_domain(cls, item: ClothingItem) -> "ItemPayload":
        return cls(
            item_id=item.item_id,
            name=item.name,
            category=item.category,
            color=item.color,
            brand=item.brand,
            subcategory=item.subcategory,
            size=item.size,
            notes=item.notes,
            min_temperature=item.min_temperature,
            max_temperature=item.max_temperature,
            conditions=list(item.conditions),
            style_tags=list(item.style_tags),
            wear_count=item.wear_count,
            last_worn=item.last_worn,
            favorite=item.favorite,
        )


class OutfitPayload(BaseModel):
    """Wire shape of an outfit and its items."""

    outfit_id: Optional[str] = None
    name: str = Field(min_length=1)
    items: List[ItemPayload] = []
    last_worn: Optional[datetime] = None
    wear_count: int = Field(default=0, ge=0)
    favorite: bool = False
    notes: Optional[str] = None
    min_temperature: Optional[float] = None
    max_temperature: Optional[float] = None
    weather_tags: List[str] = []
    style_tags: List[str] = []
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    synthesized: bool = False

    def to_domain(self) -> Outfit:
        data = self.model_dump(exclude_none=True, exclude={"items"})
        return Outfit(items=[item.to_domain() for item in self.items], **data)

    @classmethod
    def from_domain(cls, outfit: Outfit) -> "OutfitPayload":
        return cls(
            outfit_id=outfit.outfit_id,
            name=outfit.name,
            items=[ItemPayload.from_domain(item) for item in outfit.items],
            last_worn=outfit.last_worn,
            wear_count=outfit.wear_count,
            favorite=outfit.favorite,
            notes=outfit.notes,
            min_temperature=outfit.min_temperature,
            max_temperature=outfit.max_temperature,
            weather_tags=list(outfit.weather_tags),
            style_tags=list(outfit.style_tags),
            rating=outfit.rating,
            synthesized=outfit.synthesized,
        )


class RecommendationRequest(BaseModel):
    """Input contract for a recommendation run.

    Omitted ``outfits`` fall back to the stored wardrobe; omitted
    ``weather_tags`` fall back to the current weather at ``location`` (or the
    configured default location).
    """

    user_id: str = Field(min_length=1, max_length=128, pattern=USER_ID_PATTERN)
    outfits: Optional[List[OutfitPayload]] = None
    weather_tags: Optional[List[str]] = None
    limit: Optional[int] = Field(default=None, ge=0)
    temperature: Optional[float] = None
    occasion: Optional[str] = None
    location: Optional[str] = None

    @field_validator("weather_tags")
    @classmethod
    def check_weather_tags(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return _weather_tags(value)


class RecommendationEntry(BaseModel):
    outfit: OutfitPayload
    score: float
    reason: str
    synthesized: bool = False

    @classmethod
    def from_domain(cls, recommendation: Recommendation) -> "RecommendationEntry":
        return cls(
            outfit=OutfitPayload.from_domain(recommendation.outfit),
            score=recommendation.score,
            reason=recommendation.reason,
            synthesized=recommendation.synthesized,
        )


class RecommendationResponse(BaseModel):
    status: Literal["ok"] = "ok"
    user_id: str
    weather_tags: List[str]
    recommendations: List[RecommendationEntry] = []


class StyleBoardPayload(BaseModel):
    """Analysed inspiration board used as a suggestion signal."""

    name: str = Field(min_length=1)
    season: Optional[str] = None
    occasion: Optional[str] = None
    dominant_colors: List[str] = []
    detected_styles: List[str] = []

    def to_domain(self) -> StyleBoard:
        return StyleBoard(**self.model_dump(exclude_none=True))


class SuggestionRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=128, pattern=USER_ID_PATTERN)
    boards: List[StyleBoardPayload] = []
    limit: Optional[int] = Field(default=None, ge=0)


class SuggestionEntry(BaseModel):
    suggestion_id: str
    recommendation_type: str
    confidence: float
    adventure_level: float
    reason: str
    season: str
    category: Optional[str] = None
    style: Optional[str] = None
    color: Optional[str] = None
    brand: Optional[str] = None

    @classmethod
    def from_domain(cls, suggestion: StyleSuggestion) -> "SuggestionEntry":
        return cls(**asdict(suggestion))


class SuggestionResponse(BaseModel):
    status: Literal["ok"] = "ok"
    user_id: str
    suggestions: List[SuggestionEntry] = []


class FeedbackPayload(BaseModel):
    """A user's reaction to a recommendation."""

    user_id: str = Field(min_length=1, max_length=128, pattern=USER_ID_PATTERN)
    recommendation_type: str
    response: str
    rating: int = Field(ge=1, le=5)
    recommendation_id: Optional[str] = None
    time: Optional[datetime] = None
    weather: Optional[List[str]] = None
    occasion: Optional[str] = None

    @field_validator("weather")
    @classmethod
    def check_weather(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return _weather_tags(value)

    def to_domain(self, preference_id: str) -> StyleFeedback:
        context = FeedbackContext(time=self.time or datetime.now(), weather=self.weather, occasion=self.occasion)
        return StyleFeedback(
            recommendation_type=self.recommendation_type,
            response=self.response,
            rating=self.rating,
            preference_id=preference_id,
            recommendation_id=self.recommendation_id,
            context=context,
        )


class FitPayload(BaseModel):
    category: str
    fit_type: str

    def to_domain(self) -> FitPreference:
        return FitPreference(category=self.category, fit_type=self.fit_type)


class PreferencePayload(BaseModel):
    """Read model of a user's style preference."""

    preference_id: str
    user_id: str
    favorite_colors: List[str] = []
    favorite_styles: List[str] = []
    favored_brands: List[str] = []
    favored_fits: List[FitPayload] = []
    adventure_level: float
    seasonal_preference: Dict[str, float] = {}
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, preference: StylePreference) -> "PreferencePayload":
        return cls(
            preference_id=preference.preference_id,
            user_id=preference.user_id,
            favorite_colors=list(preference.favorite_colors),
            favorite_styles=list(preference.favorite_styles),
            favored_brands=list(preference.favored_brands),
            favored_fits=[FitPayload(category=fit.category, fit_type=fit.fit_type) for fit in preference.favored_fits],
            adventure_level=preference.adventure_level,
            seasonal_preference=dict(preference.seasonal_preference),
            created_at=preference.created_at,
            updated_at=preference.updated_at,
        )


class PreferenceUpdate(BaseModel):
    """Newly observed values merged into the ranked preference lists."""

    new_colors: Optional[List[str]] = None
    new_styles: Optional[List[str]] = None
    new_brands: Optional[List[str]] = None
    new_fits: Optional[List[FitPayload]] = None
    adventure_sample: Optional[float] = None

    def merge_kwargs(self) -> Dict[str, Any]:
        updates: Dict[str, Any] = {
            "new_colors": self.new_colors,
            "new_styles": self.new_styles,
            "new_brands": self.new_brands,
        }
        if self.new_fits is not None:
            updates["new_fits"] = [fit.to_domain() for fit in self.new_fits]
        return {key: value for key, value in updates.items() if value is not None}


__all__ = [
    "FeedbackPayload",
    "FitPayload",
    "ItemPayload",
    "OutfitPayload",
    "PreferencePayload",
    "PreferenceUpdate",
    "RecommendationEntry",
    "RecommendationRequest",
    "RecommendationResponse",
    "StyleBoardPayload",
    "SuggestionEntry",
    "SuggestionRequest",
    "SuggestionResponse",
    "USER_ID_PATTERN",
]
