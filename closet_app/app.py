"""Closet Curator app bootstrap."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from closet_app.config import AppConfig
from closet_app.logging_config import configure_logging, get_logger, log_event
from logic.feedback import FeedbackProcessor
from logic.recommendation import Recommendation, RecommendationGenerator
from logic.style_suggestions import StyleSuggestion, StyleSuggestionEngine
from memory.preference_store import (
    JSONPreferenceStore,
    PreferenceManager,
    PreferenceStore,
    SQLitePreferenceStore,
)
from models.outfit import Outfit
from models.style_board import StyleBoard
from models.style_feedback import StyleFeedback
from models.style_preference import FitPreference, StylePreference
from models.taxonomy import WEATHER_TAGS, validate_tags
from tools.observability import instrument_operation
from tools.style_analysis import ImageStyleAnalyzer, StyleAnalysisService
from tools.wardrobe_store import SQLiteWardrobeStore, WardrobeStore
from tools.weather_provider import OpenWeatherProvider, WeatherProvider, WeatherSnapshot


LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class RecommendationRun:
    """Recommendations together with the weather tags they were scored against."""

    weather_tags: List[str]
    recommendations: List[Recommendation]


class ClosetCuratorApp:
    """Wires together preference storage, the wardrobe and the recommendation engine."""

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        weather_provider: WeatherProvider | None = None,
        wardrobe_store: WardrobeStore | None = None,
        preference_store: PreferenceStore | None = None,
        style_analyzer: ImageStyleAnalyzer | None = None,
    ) -> None:
        self.config = config or AppConfig.from_env()
        configure_logging()

        self.preference_store = preference_store or self._build_preference_store()
        self.preference_manager = PreferenceManager(store=self.preference_store)
        self.wardrobe_store = wardrobe_store or SQLiteWardrobeStore(
            self.config.wardrobe_db_path or "data/wardrobe.db"
        )
        self.weather_provider = weather_provider or OpenWeatherProvider(api_key=self.config.weather_api_key)
        self.generator = RecommendationGenerator()
        self.suggestion_engine = StyleSuggestionEngine()
        self.feedback_processor = FeedbackProcessor(self.preference_manager)
        self.style_analysis = StyleAnalysisService(style_analyzer) if style_analyzer else None

    def _build_preference_store(self) -> PreferenceStore:
        if self.config.preference_store_backend.lower() == "sqlite":
            return SQLitePreferenceStore(self.config.preference_store_path or "data/preferences.db")
        return JSONPreferenceStore(self.config.preference_store_path or "data/preferences")

    def current_weather(self, location: str | None = None) -> WeatherSnapshot:
        location = location or self.config.default_location
        if not location:
            raise ValueError("A location is required; set default_location or pass one explicitly")
        return self.weather_provider.current_weather(location)

    def get_preferences(self, user_id: str) -> StylePreference:
        return self.preference_manager.snapshot(user_id)

    def generate_recommendations(
        self,
        user_id: str,
        outfits: Optional[Sequence[Outfit]] = None,
        weather_tags: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
        temperature: Optional[float] = None,
        occasion: Optional[str] = None,
        location: Optional[str] = None,
    ) -> List[Recommendation]:
        return self.recommend(
            user_id,
            outfits=outfits,
            weather_tags=weather_tags,
            limit=limit,
            temperature=temperature,
            occasion=occasion,
            location=location,
        ).recommendations

    @instrument_operation("recommend")
    def recommend(
        self,
        user_id: str,
        outfits: Optional[Sequence[Outfit]] = None,
        weather_tags: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
        temperature: Optional[float] = None,
        occasion: Optional[str] = None,
        location: Optional[str] = None,
    ) -> RecommendationRun:
        """Rank outfits for ``user_id`` and fill gaps with synthesized ones.

        Without explicit ``outfits`` the stored outfits and wardrobe items are
        used. Without explicit ``weather_tags`` the current weather at
        ``location`` (or the configured default) supplies the tags, the
        temperature filter and the item condition filter. The returned run
        records the weather tags that were actually applied.
        """

        limit = self.config.recommendation_limit if limit is None else limit
        conditions: Optional[List[str]] = None
        if weather_tags is None:
            snapshot = self.current_weather(location)
            weather_tags = snapshot.weather_tags
            conditions = snapshot.conditions
            if temperature is None:
                temperature = snapshot.temperature
        weather_tags = validate_tags(weather_tags, WEATHER_TAGS, "weather tag")

        wardrobe_items = None
        if outfits is None:
            outfits = self.wardrobe_store.list_outfits()
            wardrobe_items = self.wardrobe_store.list_items()

        preference = self.preference_manager.snapshot(user_id)
        recommendations = self.generator.rank(
            outfits,
            weather_tags,
            preference,
            limit,
            wardrobe_items=wardrobe_items,
            temperature=temperature,
            occasion=occasion,
            conditions=conditions,
        )
        log_event(
            LOGGER,
            logging.INFO,
            "recommendations_generated",
            user_id=user_id,
            candidates=len(outfits),
            returned=len(recommendations),
            synthesized=sum(1 for entry in recommendations if entry.synthesized),
            weather_tags=weather_tags,
        )
        return RecommendationRun(weather_tags=weather_tags, recommendations=recommendations)

    @instrument_operation("suggest_styles")
    def suggest_styles(
        self,
        user_id: str,
        boards: Sequence[StyleBoard] = (),
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[StyleSuggestion]:
        """Suggest styles, colours, brands and items that would widen the wardrobe."""

        preference = self.preference_manager.snapshot(user_id)
        suggestions = self.suggestion_engine.suggest(
            preference, boards, self.wardrobe_store.list_items(), now=now, limit=limit
        )
        log_event(
            LOGGER,
            logging.INFO,
            "suggestions_generated",
            user_id=user_id,
            boards=len(boards),
            returned=len(suggestions),
        )
        return suggestions

    @instrument_operation("record_feedback")
    def record_feedback(self, user_id: str, feedback: StyleFeedback) -> StylePreference:
        return self.feedback_processor.record(user_id, feedback)

    def feedback_history(self, user_id: str, limit: Optional[int] = None) -> List[StyleFeedback]:
        return self.preference_manager.feedback_history(user_id, limit=limit)

    def update_preferences(
        self,
        user_id: str,
        new_colors: Optional[Iterable[str]] = None,
        new_styles: Optional[Iterable[str]] = None,
        new_brands: Optional[Iterable[str]] = None,
        new_fits: Optional[Iterable[FitPreference]] = None,
    ) -> StylePreference:
        return self.preference_manager.update_preferences(
            user_id,
            new_colors=new_colors,
            new_styles=new_styles,
            new_brands=new_brands,
            new_fits=new_fits,
        )

    def update_adventure_level(self, user_id: str, sample: float) -> StylePreference:
        return self.preference_manager.update_adventure_level(user_id, sample)

    @instrument_operation("analyze_style_board")
    def analyze_style_board(self, user_id: str, board: StyleBoard) -> StyleBoard:
        """Analyse ``board`` and merge what it shows into the user's preference."""

        if self.style_analysis is None:
            raise RuntimeError("No image style analyzer configured")
        self.preference_manager.mutate(user_id, lambda preference: self.style_analysis.analyze_board(board, preference))
        return board


__all__ = ["ClosetCuratorApp", "RecommendationRun"]
