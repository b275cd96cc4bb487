"""Clothing item data model and helpers."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from models.taxonomy import STYLE_TAGS, WEATHER_CONDITIONS, validate_category, validate_tags


def _new_id() -> str:
    return uuid.uuid4().hex


def _check_temperature_range(min_temperature: Optional[float], max_temperature: Optional[float]) -> None:
    if min_temperature is not None and max_temperature is not None and min_temperature > max_temperature:
        raise ValueError(
            f"min_temperature {min_temperature} exceeds max_temperature {max_temperature}"
        )


def temperature_in_range(
    temperature: float, min_temperature: Optional[float], max_temperature: Optional[float]
) -> bool:
    """Inclusive range check; a missing bound means any temperature is fine."""

    if min_temperature is None or max_temperature is None:
        return True
    return min_temperature <= temperature <= max_temperature


@dataclass
class ClothingItem:
    """Represents a single piece in the user's wardrobe."""

    name: str
    category: str
    color: str
    item_id: str = field(default_factory=_new_id)
    brand: Optional[str] = None
    subcategory: Optional[str] = None
    size: Optional[str] = None
    notes: Optional[str] = None
    min_temperature: Optional[float] = None
    max_temperature: Optional[float] = None
    conditions: List[str] = field(default_factory=list)
    style_tags: List[str] = field(default_factory=list)
    wear_count: int = 0
    last_worn: Optional[datetime] = None
    favorite: bool = False
    date_added: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        self.category = validate_category(self.category)
        self.color = str(self.color).strip()
        if not self.color:
            raise ValueError("ClothingItem.color must not be empty")
        if self.brand is not None:
            self.brand = str(self.brand).strip() or None
        self.conditions = validate_tags(self.conditions, WEATHER_CONDITIONS, "weather condition")
        self.style_tags = validate_tags(self.style_tags, STYLE_TAGS, "style tag")
        if self.wear_count < 0:
            raise ValueError("wear_count cannot be negative")
        _check_temperature_range(self.min_temperature, self.max_temperature)

    def mark_as_worn(self, now: Optional[datetime] = None) -> None:
        self.wear_count += 1
        self.last_worn = now or datetime.now()

    def is_suitable_for_temperature(self, temperature: float) -> bool:
        return temperature_in_range(temperature, self.min_temperature, self.max_temperature)

    def is_suitable_for_conditions(self, conditions: Iterable[str]) -> bool:
        """An item without condition tags is fine in any weather."""

        if not self.conditions:
            return True
        return bool(set(self.conditions).intersection(conditions))


def from_raw_metadata(metadata: Dict[str, Any]) -> ClothingItem:
    """Factory to build a :class:`ClothingItem` from loose metadata.

    Detection collaborators and import scripts hand over dictionaries with
    optional keys; missing required fields raise ``ValueError``.
    """

    required_fields = ["name", "category", "color"]
    missing = [key for key in required_fields if not metadata.get(key)]
    if missing:
        raise ValueError(f"Missing required fields for ClothingItem: {missing}")

    known = {key: value for key, value in metadata.items() if key in ClothingItem.__dataclass_fields__}
    for key in ("conditions", "style_tags"):
        value = known.get(key)
        if value is None:
            known.pop(key, None)
        elif isinstance(value, str):
            known[key] = [value]
    return ClothingItem(**known)


__all__ = ["ClothingItem", "from_raw_metadata", "temperature_in_range"]
