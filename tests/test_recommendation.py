"""Recommendation ranking and fallback outfit synthesis."""

from __future__ import annotations

from datetime import datetime

import pytest

from logic.recommendation import RecommendationGenerator, generate_recommendations
from models.clothing_item import ClothingItem
from models.outfit import Outfit
from models.style_preference import StylePreference

NOW = datetime(2024, 6, 1, 12, 0)


def _casual() -> StylePreference:
    return StylePreference(user_id="u1", favorite_styles=["casual"])


def _tee() -> ClothingItem:
    return ClothingItem(name="Tee", category="tops", color="white", style_tags=["casual"])


def _jeans() -> ClothingItem:
    return ClothingItem(name="Jeans", category="bottoms", color="blue")


def _outfit_a(**kwargs) -> Outfit:
    return Outfit(
        name="A",
        items=kwargs.pop("items", None) or [_tee(), _jeans()],
        weather_tags=["warm"],
        style_tags=["casual"],
        favorite=True,
        **kwargs,
    )


def test_only_the_qualifying_outfit_is_returned_for_limit_one() -> None:
    outfit_a = _outfit_a()
    outfit_b = Outfit(name="B", items=[_tee(), _jeans()], wear_count=10)

    result = generate_recommendations([outfit_b, outfit_a], ["warm"], _casual(), limit=1, now=NOW)

    assert [outfit.name for outfit in result] == ["A"]


def test_empty_catalogue_and_wardrobe_yield_empty_result() -> None:
    assert RecommendationGenerator().generate([], ["warm"], _casual(), 5) == []


def test_non_positive_limit_returns_nothing() -> None:
    assert RecommendationGenerator().generate([_outfit_a()], ["warm"], _casual(), 0) == []


def test_real_outfits_come_before_synthesized_ones() -> None:
    tee, jeans = _tee(), _jeans()
    blouse = ClothingItem(name="Blouse", category="tops", color="red", style_tags=["elegant"])
    skirt = ClothingItem(name="Skirt", category="bottoms", color="black")
    sneakers = ClothingItem(name="Sneakers", category="shoes", color="white")
    outfit_a = _outfit_a(items=[tee, jeans])

    ranked = RecommendationGenerator().rank(
        [outfit_a], ["warm"], _casual(), 3, wardrobe_items=[tee, jeans, blouse, skirt, sneakers], now=NOW
    )

    assert [entry.outfit.name for entry in ranked] == ["A", "Tee + Skirt", "Blouse + Jeans"]
    assert [entry.synthesized for entry in ranked] == [False, True, True]
    assert ranked[0].reason == "Matches your casual style and suits warm weather"
    for entry in ranked[1:]:
        assert entry.outfit.is_valid
        assert entry.outfit.synthesized
        assert sneakers in entry.outfit.items
        assert entry.outfit.weather_tags == ["warm"]


def test_synthesis_does_not_repeat_existing_combinations() -> None:
    ranked = RecommendationGenerator().rank([_outfit_a()], ["warm"], _casual(), 3, now=NOW)
    assert [entry.outfit.name for entry in ranked] == ["A"]


def test_dress_alone_is_enough_to_synthesize() -> None:
    dress = ClothingItem(name="Sundress", category="dresses", color="yellow")
    sandals = ClothingItem(name="Sandals", category="shoes", color="tan")

    results = RecommendationGenerator().synthesize(
        [dress, sandals], ["hot"], _casual(), 2, occasion="vacation", now=NOW
    )

    assert len(results) == 1
    outfit = results[0].outfit
    assert outfit.name == "Sundress"
    assert outfit.items == [dress, sandals]
    assert outfit.is_valid
    assert results[0].reason == "Sundress works as a complete outfit on its own for a vacation occasion in hot weather"


def test_synthesis_needs_a_top_and_bottom_or_a_dress() -> None:
    tops_only = [_tee(), ClothingItem(name="Sneakers", category="shoes", color="white")]
    assert RecommendationGenerator().synthesize(tops_only, ["warm"], _casual(), 3) == []


def test_outerwear_is_only_added_for_layering_weather() -> None:
    coat = ClothingItem(name="Coat", category="outerwear", color="camel")
    wardrobe = [_tee(), _jeans(), coat]
    generator = RecommendationGenerator()

    cold = generator.synthesize(wardrobe, ["cold"], _casual(), 1, now=NOW)
    warm = generator.synthesize(wardrobe, ["warm"], _casual(), 1, now=NOW)

    assert coat in cold[0].outfit.items
    assert coat not in warm[0].outfit.items


def test_temperature_incompatible_outfits_are_dropped() -> None:
    outfit = _outfit_a(min_temperature=20, max_temperature=30)
    generator = RecommendationGenerator()

    assert generator.rank([outfit], ["warm"], _casual(), 1, wardrobe_items=[], temperature=5, now=NOW) == []
    assert len(generator.rank([outfit], ["warm"], _casual(), 1, wardrobe_items=[], temperature=25, now=NOW)) == 1


def test_synthesis_filters_items_by_temperature_and_conditions() -> None:
    wool = ClothingItem(name="Wool jumper", category="tops", color="grey", min_temperature=-10, max_temperature=15)
    linen = ClothingItem(name="Linen shirt", category="tops", color="white", conditions=["sunny"])
    generator = RecommendationGenerator()

    assert generator.synthesize([wool, _jeans()], ["warm"], _casual(), 1, temperature=25) == []
    assert generator.synthesize([linen, _jeans()], ["rainy"], _casual(), 1, conditions=["rainy"]) == []
    assert len(generator.synthesize([linen, _jeans()], ["warm"], _casual(), 1, conditions=["sunny"])) == 1


def test_invalid_outfits_never_qualify() -> None:
    bling = Outfit(
        name="Bling",
        items=[ClothingItem(name="Ring", category="accessories", color="gold")],
        weather_tags=["warm"],
        favorite=True,
    )
    assert RecommendationGenerator().rank([bling], ["warm"], _casual(), 3, wardrobe_items=[], now=NOW) == []


def test_equal_scores_keep_input_order() -> None:
    first = Outfit(name="First", items=[_tee(), _jeans()], weather_tags=["warm"])
    second = Outfit(name="Second", items=[_tee(), _jeans()], weather_tags=["warm"])

    ranked = RecommendationGenerator().generate([first, second], ["warm"], _casual(), 2, wardrobe_items=[], now=NOW)

    assert [outfit.name for outfit in ranked] == ["First", "Second"]


def test_weather_tags_are_normalised_before_scoring() -> None:
    generator = RecommendationGenerator()

    upper = generator.rank([_outfit_a()], ["Warm"], _casual(), 1, wardrobe_items=[], now=NOW)
    lower = generator.rank([_outfit_a()], ["warm"], _casual(), 1, wardrobe_items=[], now=NOW)

    assert [entry.score for entry in upper] == [entry.score for entry in lower]
    assert upper[0].reason == lower[0].reason


@pytest.mark.parametrize("wardrobe", [[], [_tee(), _jeans()]])
def test_unknown_weather_tags_are_rejected(wardrobe) -> None:
    with pytest.raises(ValueError, match="weather tag"):
        RecommendationGenerator().rank([_outfit_a()], ["sunny"], _casual(), 3, wardrobe_items=wardrobe, now=NOW)


def test_generator_threshold_is_honoured() -> None:
    outfit = _outfit_a()

    assert len(RecommendationGenerator().rank([outfit], ["warm"], _casual(), 1, wardrobe_items=[], now=NOW)) == 1
    assert RecommendationGenerator(threshold=10.0).rank([outfit], ["warm"], _casual(), 1, wardrobe_items=[], now=NOW) == []
