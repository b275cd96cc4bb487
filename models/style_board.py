"""Inspiration boards whose analysed images feed the style preference."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from models.taxonomy import (
    STYLE_TAGS,
    validate_category,
    validate_occasion,
    validate_season,
    validate_tags,
)


@dataclass
class StyleBoard:
    """A named collection of inspiration images."""

    name: str
    board_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    preference_id: Optional[str] = None
    season: Optional[str] = None
    occasion: Optional[str] = None
    mood: Optional[str] = None
    images: List[str] = field(default_factory=list)
    dominant_colors: List[str] = field(default_factory=list)
    detected_styles: List[str] = field(default_factory=list)
    detected_items: Dict[str, int] = field(default_factory=dict)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if self.season is not None:
            self.season = validate_season(self.season)
        if self.occasion is not None:
            self.occasion = validate_occasion(self.occasion)
        self.detected_styles = validate_tags(self.detected_styles, STYLE_TAGS, "style tag")

    def add_image(self, image_ref: str) -> None:
        self.images.append(image_ref)
        self.updated_at = datetime.now()

    def remove_image(self, image_ref: str) -> bool:
        if image_ref not in self.images:
            return False
        self.images.remove(image_ref)
        self.updated_at = datetime.now()
        return True

    def update_style_data(self, colors: List[str], styles: List[str], item_counts: Dict[str, int]) -> None:
        """Replace the analysis results with a fresh aggregation."""

        self.dominant_colors = list(colors)
        self.detected_styles = validate_tags(styles, STYLE_TAGS, "style tag")
        self.detected_items = {validate_category(category): int(count) for category, count in item_counts.items()}
        self.updated_at = datetime.now()


__all__ = ["StyleBoard"]
