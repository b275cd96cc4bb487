"""Inspiration board analysis feeding detected colours and styles into preferences."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from models.style_board import StyleBoard
from models.style_preference import StylePreference
from models.taxonomy import CATEGORIES, STYLE_TAGS, normalise_tags

LOGGER = logging.getLogger(__name__)

TOP_COLORS = 5
TOP_STYLES = 3


@dataclass
class StyleAnalysisResult:
    """What an analyzer detected in a single image."""

    colors: List[str] = field(default_factory=list)
    styles: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)


class ImageStyleAnalyzer(ABC):
    """Detects colours, styles and garment categories in an image."""

    @abstractmethod
    def analyze(self, image_ref: str) -> StyleAnalysisResult:
        """Return the analysis for ``image_ref``."""


class StaticStyleAnalyzer(ImageStyleAnalyzer):
    """Returns pre-computed results keyed by image reference."""

    def __init__(self, results: Mapping[str, StyleAnalysisResult]) -> None:
        self.results = dict(results)

    def analyze(self, image_ref: str) -> StyleAnalysisResult:
        return self.results.get(image_ref, StyleAnalysisResult())


def _most_common(counter: Counter, count: int) -> List[str]:
    # Counter.most_common keeps first-seen order among equal counts
    return [value for value, _ in counter.most_common(count)]


class StyleAnalysisService:
    """Aggregates per-image analysis into board-level style data."""

    def __init__(self, analyzer: ImageStyleAnalyzer) -> None:
        self.analyzer = analyzer

    def analyze_board(self, board: StyleBoard, preference: Optional[StylePreference] = None) -> StyleBoard:
        color_counts: Counter = Counter()
        style_counts: Counter = Counter()
        item_counts: Dict[str, int] = {}

        for image_ref in board.images:
            result = self.analyzer.analyze(image_ref)
            color_counts.update(color.strip() for color in result.colors if color.strip())
            style_counts.update(normalise_tags(result.styles, STYLE_TAGS))
            for category in result.categories:
                key = category.strip().lower()
                if key in CATEGORIES:
                    item_counts[key] = item_counts.get(key, 0) + 1

        colors = _most_common(color_counts, TOP_COLORS)
        styles = _most_common(style_counts, TOP_STYLES)
        board.update_style_data(colors, styles, item_counts)
        LOGGER.info(
            "Analyzed board %s: %s images, %s colours, %s styles",
            board.board_id,
            len(board.images),
            len(colors),
            len(styles),
        )

        if preference is not None:
            preference.update_preferences(new_colors=colors, new_styles=styles)
            board.preference_id = preference.preference_id
        return board


__all__ = [
    "ImageStyleAnalyzer",
    "StaticStyleAnalyzer",
    "StyleAnalysisResult",
    "StyleAnalysisService",
    "TOP_COLORS",
    "TOP_STYLES",
]
