"""Outfit schema and validity rules."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from models.clothing_item import ClothingItem, temperature_in_range
from models.taxonomy import BOTTOM_CAPABLE, STYLE_TAGS, TOP_CAPABLE, WEATHER_TAGS, validate_tags


def _new_id() -> str:
    return uuid.uuid4().hex


def _check_rating(rating: Optional[int]) -> None:
    if rating is not None and not 1 <= int(rating) <= 5:
        raise ValueError(f"Outfit rating must be between 1 and 5, got {rating}")


def _distinct(values: List[str]) -> List[str]:
    seen: List[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


@dataclass
class Outfit:
    """A named combination of wardrobe items.

    The outfit references its items but does not own them; the same item can
    appear in many outfits.
    """

    name: str
    items: List[ClothingItem] = field(default_factory=list)
    outfit_id: str = field(default_factory=_new_id)
    date_created: datetime = field(default_factory=datetime.now)
    last_worn: Optional[datetime] = None
    wear_count: int = 0
    favorite: bool = False
    notes: Optional[str] = None
    min_temperature: Optional[float] = None
    max_temperature: Optional[float] = None
    weather_tags: List[str] = field(default_factory=list)
    style_tags: List[str] = field(default_factory=list)
    rating: Optional[int] = None
    synthesized: bool = False

    def __post_init__(self) -> None:
        self.weather_tags = validate_tags(self.weather_tags, WEATHER_TAGS, "weather tag")
        self.style_tags = validate_tags(self.style_tags, STYLE_TAGS, "style tag")
        if self.wear_count < 0:
            raise ValueError("wear_count cannot be negative")
        _check_rating(self.rating)

    @property
    def is_valid(self) -> bool:
        """True when the items cover something for the top and the bottom.

        A dress covers both on its own.
        """

        if not self.items:
            return False
        categories = {item.category for item in self.items}
        return bool(categories & TOP_CAPABLE) and bool(categories & BOTTOM_CAPABLE)

    @property
    def colors(self) -> List[str]:
        return _distinct([item.color for item in self.items])

    @property
    def brands(self) -> List[str]:
        return _distinct([item.brand for item in self.items if item.brand])

    @property
    def item_ids(self) -> List[str]:
        return [item.item_id for item in self.items]

    def is_suitable_for_temperature(self, temperature: float) -> bool:
        return temperature_in_range(temperature, self.min_temperature, self.max_temperature)

    def mark_as_worn(self, now: Optional[datetime] = None) -> None:
        worn_at = now or datetime.now()
        self.wear_count += 1
        self.last_worn = worn_at
        for item in self.items:
            item.mark_as_worn(worn_at)

    def update_rating(self, rating: int) -> None:
        _check_rating(rating)
        self.rating = int(rating)

    def remove_item(self, item_id: str) -> bool:
        """Drop an item reference, e.g. when the item is deleted from the wardrobe."""

        remaining = [item for item in self.items if item.item_id != item_id]
        removed = len(remaining) != len(self.items)
        self.items = remaining
        return removed


__all__ = ["Outfit"]
