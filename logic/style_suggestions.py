"""Deterministic style, colour, brand and item suggestions.

Outfit recommendations rank what the user already owns. Suggestions look
outward instead: style tags the user has not embraced yet, colours that recur
on inspiration boards, brands already in the wardrobe but not yet favoured,
and one item idea per category built from the strongest colour and style
signals. The same inputs always produce the same suggestions.
"""
from __future__ import annotations

import logging
import uuid
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from models.clothing_item import ClothingItem
from models.style_board import StyleBoard
from models.style_preference import StylePreference, merge_by_frequency
from models.taxonomy import CATEGORIES, STYLE_TAGS

logger = logging.getLogger(__name__)

SUGGESTION_LIMIT = 10
DEFAULT_COLOR = "black"
DEFAULT_STYLE = "casual"

SEASON_BY_MONTH: Dict[int, str] = {
    12: "winter", 1: "winter", 2: "winter",
    3: "spring", 4: "spring", 5: "spring",
    6: "summer", 7: "summer", 8: "summer",
    9: "fall", 10: "fall", 11: "fall",
}

# (base, span) pairs: confidence = base + span * signal, with signal in [0, 1]
STYLE_CONFIDENCE = (0.7, 0.25)
COLOR_CONFIDENCE = (0.7, 0.25)
BRAND_CONFIDENCE = (0.7, 0.25)
ITEM_CONFIDENCE = (0.65, 0.25)
ITEM_ADVENTURE_BOOST = 1.2


def season_for(moment: datetime) -> str:
    """Meteorological season for ``moment`` (northern hemisphere)."""

    return SEASON_BY_MONTH[moment.month]


def _unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def _confidence(band, signal: float) -> float:
    base, span = band
    return round(base + span * _unit(signal), 4)


@dataclass(frozen=True)
class StyleSuggestion:
    recommendation_type: str
    confidence: float
    adventure_level: float
    reason: str
    season: str
    category: Optional[str] = None
    style: Optional[str] = None
    color: Optional[str] = None
    brand: Optional[str] = None
    suggestion_id: str = field(default_factory=lambda: uuid.uuid4().hex)


class StyleSuggestionEngine:
    """Builds ranked suggestions from a preference, style boards and the wardrobe."""

    def __init__(self, limit: int = SUGGESTION_LIMIT) -> None:
        self.limit = limit

    def suggest(
        self,
        preference: StylePreference,
        boards: Sequence[StyleBoard] = (),
        wardrobe_items: Sequence[ClothingItem] = (),
        now: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[StyleSuggestion]:
        limit = self.limit if limit is None else limit
        if limit <= 0:
            return []
        season = season_for(now or datetime.now())

        board_colors = [color for board in boards for color in board.dominant_colors]
        board_styles = [style for board in boards for style in board.detected_styles]
        colors = merge_by_frequency(preference.favorite_colors, board_colors)
        styles = merge_by_frequency(preference.favorite_styles, board_styles)

        suggestions: List[StyleSuggestion] = []
        suggestions.extend(self._styles(preference, styles, season))
        suggestions.extend(self._colors(preference, boards, season))
        suggestions.extend(self._brands(preference, wardrobe_items, season))
        suggestions.extend(self._items(preference, colors, styles, wardrobe_items, season))

        # sorted() is stable, so equal confidences keep generation order
        ranked = sorted(suggestions, key=lambda suggestion: -suggestion.confidence)[:limit]
        logger.info(
            "Built %s suggestions for %s (%s season), returning %s",
            len(suggestions),
            preference.user_id,
            season,
            len(ranked),
        )
        return ranked

    def _styles(self, preference: StylePreference, styles: List[str], season: str) -> List[StyleSuggestion]:
        level = _unit(preference.adventure_level)
        return [
            StyleSuggestion(
                recommendation_type="style",
                confidence=_confidence(STYLE_CONFIDENCE, level),
                adventure_level=round(0.3 + 0.6 * level, 4),
                reason="This style matches elements from your style boards and complements your current preferences",
                season=season,
                style=tag,
            )
            for tag in STYLE_TAGS
            if tag not in styles
        ]

    def _colors(self, preference: StylePreference, boards: Sequence[StyleBoard], season: str) -> List[StyleSuggestion]:
        if not boards:
            return []
        # one vote per board, so a colour repeated inside a board counts once
        votes: Counter = Counter()
        for board in boards:
            votes.update(dict.fromkeys(board.dominant_colors, 1))
        level = _unit(preference.adventure_level)
        return [
            StyleSuggestion(
                recommendation_type="color",
                confidence=_confidence(COLOR_CONFIDENCE, count / len(boards)),
                adventure_level=round(level, 4),
                reason=f"The colour {color} keeps appearing on your style boards",
                season=season,
                color=color,
            )
            for color, count in votes.most_common()
            if color not in preference.favorite_colors
        ]

    def _brands(
        self, preference: StylePreference, wardrobe_items: Sequence[ClothingItem], season: str
    ) -> List[StyleSuggestion]:
        wear: Dict[str, int] = {}
        for item in wardrobe_items:
            if item.brand and item.brand not in preference.favored_brands:
                wear[item.brand] = wear.get(item.brand, 0) + item.wear_count
        if not wear:
            return []
        most_worn = max(wear.values())
        level = _unit(preference.adventure_level)
        return [
            StyleSuggestion(
                recommendation_type="brand",
                confidence=_confidence(BRAND_CONFIDENCE, count / most_worn if most_worn else 0.0),
                adventure_level=round(0.2 + 0.6 * level, 4),
                reason="Based on your style preferences and the brands already in your wardrobe",
                season=season,
                brand=brand,
            )
            for brand, count in sorted(wear.items(), key=lambda entry: -entry[1])
        ]

    def _items(
        self,
        preference: StylePreference,
        colors: List[str],
        styles: List[str],
        wardrobe_items: Sequence[ClothingItem],
        season: str,
    ) -> List[StyleSuggestion]:
        color = colors[0] if colors else DEFAULT_COLOR
        style = styles[0] if styles else DEFAULT_STYLE
        brand = preference.favored_brands[0] if preference.favored_brands else None
        owned = {
            item.category
            for item in wardrobe_items
            if item.color == color and style in item.style_tags
        }
        strength = preference.seasonal_preference.get(season, 0.0)
        return [
            StyleSuggestion(
                recommendation_type="item",
                confidence=_confidence(ITEM_CONFIDENCE, strength),
                adventure_level=round(min(preference.adventure_level * ITEM_ADVENTURE_BOOST, 1.0), 4),
                reason=f"This {color} {category} in {style} style would complement your current wardrobe",
                season=season,
                category=category,
                style=style,
                color=color,
                brand=brand,
            )
            for category in CATEGORIES
            if category not in owned
        ]


def suggest_styles(
    preference: StylePreference,
    boards: Sequence[StyleBoard] = (),
    wardrobe_items: Sequence[ClothingItem] = (),
    now: Optional[datetime] = None,
    limit: int = SUGGESTION_LIMIT,
) -> List[StyleSuggestion]:
    """Functional entry point mirroring :meth:`StyleSuggestionEngine.suggest`."""

    return StyleSuggestionEngine().suggest(preference, boards, wardrobe_items, now=now, limit=limit)


__all__ = [
    "SEASON_BY_MONTH",
    "StyleSuggestion",
    "StyleSuggestionEngine",
    "season_for",
    "suggest_styles",
]
