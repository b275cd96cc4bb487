"""Deterministic style, colour, brand and item suggestions."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime

import pytest

from logic.style_suggestions import StyleSuggestionEngine, season_for, suggest_styles
from models.clothing_item import ClothingItem
from models.style_board import StyleBoard
from models.style_preference import StylePreference
from models.taxonomy import CATEGORIES, STYLE_TAGS

JUNE = datetime(2024, 6, 15, 9, 0)
DECEMBER = datetime(2024, 12, 15, 9, 0)


def _by_type(suggestions, recommendation_type: str):
    return [entry for entry in suggestions if entry.recommendation_type == recommendation_type]


def _boards():
    return [
        StyleBoard(name="Autumn", dominant_colors=["olive", "navy"], detected_styles=["elegant"]),
        StyleBoard(name="City", dominant_colors=["olive", "rust"]),
    ]


def _wardrobe():
    return [
        ClothingItem(name="Tee", category="tops", color="navy", brand="Northwind", wear_count=4, style_tags=["casual"]),
        ClothingItem(name="Jeans", category="bottoms", color="blue", brand="Acme", wear_count=2),
        ClothingItem(name="Shirt", category="tops", color="white", brand="Favoured", wear_count=10),
    ]


def _preference(**kwargs) -> StylePreference:
    return StylePreference(
        user_id="u1",
        favorite_colors=["navy"],
        favorite_styles=["casual"],
        favored_brands=["Favoured"],
        **kwargs,
    )


@pytest.mark.parametrize(
    "month, season",
    [(1, "winter"), (2, "winter"), (3, "spring"), (5, "spring"), (6, "summer"), (8, "summer"), (9, "fall"), (11, "fall"), (12, "winter")],
)
def test_season_follows_the_month(month: int, season: str) -> None:
    assert season_for(datetime(2024, month, 10)) == season


def test_styles_already_preferred_or_on_boards_are_not_suggested() -> None:
    suggestions = StyleSuggestionEngine().suggest(_preference(), _boards(), now=JUNE, limit=50)

    styles = _by_type(suggestions, "style")
    assert [entry.style for entry in styles] == ["formal", "business", "sporty", "vintage", "modern"]
    assert {entry.confidence for entry in styles} == {0.825}
    assert {entry.adventure_level for entry in styles} == {0.6}


def test_board_colours_outside_the_favourites_are_suggested_by_board_share() -> None:
    suggestions = StyleSuggestionEngine().suggest(_preference(), _boards(), now=JUNE, limit=50)

    colors = _by_type(suggestions, "color")
    assert [(entry.color, entry.confidence) for entry in colors] == [("olive", 0.95), ("rust", 0.825)]
    assert colors[0].reason == "The colour olive keeps appearing on your style boards"


def test_owned_brands_not_yet_favoured_are_ranked_by_wear() -> None:
    suggestions = StyleSuggestionEngine().suggest(_preference(), wardrobe_items=_wardrobe(), now=JUNE, limit=50)

    brands = _by_type(suggestions, "brand")
    assert [(entry.brand, entry.confidence) for entry in brands] == [("Northwind", 0.95), ("Acme", 0.825)]


def test_one_item_idea_per_missing_category() -> None:
    preference = _preference(seasonal_preference={"summer": 0.8})

    suggestions = StyleSuggestionEngine().suggest(preference, _boards(), _wardrobe(), now=JUNE, limit=50)

    items = _by_type(suggestions, "item")
    # the wardrobe already holds a navy casual top
    assert [entry.category for entry in items] == [category for category in CATEGORIES if category != "tops"]
    first = items[0]
    assert (first.color, first.style, first.brand, first.season) == ("navy", "casual", "Favoured", "summer")
    assert first.confidence == pytest.approx(0.85)
    assert first.adventure_level == pytest.approx(0.6)
    assert first.reason == "This navy bottoms in casual style would complement your current wardrobe"


def test_seasonal_strength_only_counts_for_the_current_season() -> None:
    preference = _preference(seasonal_preference={"summer": 3.0})
    engine = StyleSuggestionEngine()

    summer = _by_type(engine.suggest(preference, now=JUNE, limit=50), "item")
    winter = _by_type(engine.suggest(preference, now=DECEMBER, limit=50), "item")

    assert summer[0].confidence == pytest.approx(0.9)
    assert winter[0].confidence == pytest.approx(0.65)
    assert winter[0].season == "winter"


def test_empty_profile_falls_back_to_defaults_and_respects_the_limit() -> None:
    suggestions = suggest_styles(StylePreference(user_id="u1"), now=JUNE)

    assert len(suggestions) == 10
    assert [entry.style for entry in suggestions[:7]] == STYLE_TAGS
    assert [entry.category for entry in suggestions[7:]] == ["tops", "bottoms", "dresses"]
    assert {entry.color for entry in suggestions[7:]} == {"black"}
    assert [entry.confidence for entry in suggestions] == sorted((entry.confidence for entry in suggestions), reverse=True)


def test_suggestions_are_deterministic() -> None:
    def _content(suggestions):
        return [{key: value for key, value in asdict(entry).items() if key != "suggestion_id"} for entry in suggestions]

    first = StyleSuggestionEngine().suggest(_preference(), _boards(), _wardrobe(), now=JUNE)
    second = StyleSuggestionEngine().suggest(_preference(), _boards(), _wardrobe(), now=JUNE)

    assert _content(first) == _content(second)


def test_non_positive_limit_returns_nothing() -> None:
    assert StyleSuggestionEngine().suggest(_preference(), _boards(), now=JUNE, limit=0) == []
