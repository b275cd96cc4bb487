"""Domain model invariants: taxonomy, items, outfits, boards and feedback."""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models import taxonomy
from models.clothing_item import ClothingItem, from_raw_metadata
from models.outfit import Outfit
from models.style_board import StyleBoard
from models.style_feedback import FeedbackContext, StyleFeedback


def _item(category: str, **kwargs) -> ClothingItem:
    kwargs.setdefault("color", "black")
    return ClothingItem(name=kwargs.pop("name", category.title()), category=category, **kwargs)


def test_taxonomy_normalises_and_rejects_unknown_values() -> None:
    assert taxonomy.validate_category(" Tops ") == "tops"
    assert taxonomy.validate_response("Purchased") == "purchased"
    with pytest.raises(ValueError):
        taxonomy.validate_category("hats")
    assert taxonomy.validate_tags(["Casual", "casual", "modern"], taxonomy.STYLE_TAGS) == ["casual", "modern"]
    assert taxonomy.normalise_tags(["casual", "grunge"], taxonomy.STYLE_TAGS) == ["casual"]


def test_clothing_item_validation() -> None:
    item = _item("tops", style_tags=["Casual"], conditions=["sunny"])
    assert item.style_tags == ["casual"]
    with pytest.raises(ValueError):
        _item("hats")
    with pytest.raises(ValueError):
        _item("tops", color="  ")
    with pytest.raises(ValueError):
        _item("tops", min_temperature=25, max_temperature=10)
    with pytest.raises(ValueError):
        _item("tops", wear_count=-1)


def test_item_temperature_and_condition_suitability() -> None:
    coat = _item("outerwear", min_temperature=-10, max_temperature=12, conditions=["rainy", "snowy"])
    assert coat.is_suitable_for_temperature(5)
    assert not coat.is_suitable_for_temperature(20)
    assert coat.is_suitable_for_conditions(["rainy"])
    assert not coat.is_suitable_for_conditions(["sunny"])
    assert _item("tops").is_suitable_for_conditions(["sunny"])
    assert _item("tops").is_suitable_for_temperature(40)


def test_from_raw_metadata_requires_core_fields() -> None:
    item = from_raw_metadata({"name": "Tee", "category": "tops", "color": "white", "style_tags": "casual", "sku": "x"})
    assert item.style_tags == ["casual"]
    with pytest.raises(ValueError):
        from_raw_metadata({"name": "Tee", "category": "tops"})


def test_outfit_validity_rules() -> None:
    assert not Outfit(name="Bling", items=[_item("accessories")]).is_valid
    assert Outfit(name="Classic", items=[_item("tops"), _item("bottoms")]).is_valid
    assert Outfit(name="Dress", items=[_item("dresses")]).is_valid
    assert not Outfit(name="Half", items=[_item("tops"), _item("shoes")]).is_valid
    assert not Outfit(name="Empty").is_valid


def test_outfit_mark_as_worn_cascades_to_items() -> None:
    top, bottom = _item("tops"), _item("bottoms")
    outfit = Outfit(name="Office", items=[top, bottom])
    worn_at = datetime(2024, 5, 1, 9, 30)

    outfit.mark_as_worn(worn_at)

    assert outfit.wear_count == 1
    assert outfit.last_worn == worn_at
    assert [item.wear_count for item in outfit.items] == [1, 1]
    assert all(item.last_worn == worn_at for item in outfit.items)


def test_outfit_rating_and_item_removal() -> None:
    top, bottom = _item("tops"), _item("bottoms")
    outfit = Outfit(name="Weekend", items=[top, bottom], weather_tags=["Warm"])
    assert outfit.weather_tags == ["warm"]

    outfit.update_rating(4)
    assert outfit.rating == 4
    with pytest.raises(ValueError):
        outfit.update_rating(6)

    assert outfit.remove_item(bottom.item_id)
    assert not outfit.remove_item(bottom.item_id)
    assert not outfit.is_valid


def test_outfit_colors_and_brands_are_distinct() -> None:
    outfit = Outfit(
        name="Mono",
        items=[
            _item("tops", color="black", brand="Acme"),
            _item("bottoms", color="black", brand="Acme"),
            _item("shoes", color="white"),
        ],
    )
    assert outfit.colors == ["black", "white"]
    assert outfit.brands == ["Acme"]


def test_style_feedback_validation() -> None:
    context = FeedbackContext(weather=["Warm"], occasion="Work")
    feedback = StyleFeedback(
        recommendation_type="outfit", response="liked", rating=5, preference_id="p1", context=context
    )
    assert feedback.context.weather == ["warm"]
    assert feedback.context.occasion == "work"
    with pytest.raises(ValueError):
        StyleFeedback(recommendation_type="outfit", response="meh", rating=3, preference_id="p1")
    with pytest.raises(ValueError):
        StyleFeedback(recommendation_type="outfit", response="liked", rating=0, preference_id="p1")
    with pytest.raises(ValueError):
        StyleFeedback(recommendation_type="hat", response="liked", rating=3, preference_id="p1")


def test_style_board_images_and_style_data() -> None:
    board = StyleBoard(name="Summer", season="Summer")
    board.add_image("img-1")
    board.add_image("img-2")
    assert board.remove_image("img-1")
    assert not board.remove_image("img-1")
    assert board.images == ["img-2"]

    board.update_style_data(["navy"], ["Casual"], {"Tops": 2})
    assert board.detected_styles == ["casual"]
    assert board.detected_items == {"tops": 2}
    with pytest.raises(ValueError):
        board.update_style_data([], [], {"hats": 1})
