"""Preference merging and adventure-level adaptation."""

from __future__ import annotations

from datetime import datetime

import pytest

from models.style_preference import FitPreference, StylePreference, merge_by_frequency


def test_merge_by_frequency_weights_existing_twice() -> None:
    merged = merge_by_frequency(["black", "white"], ["white", "red", "red"])
    assert merged == ["white", "black", "red"]


def test_merge_ties_keep_first_encounter_order() -> None:
    assert merge_by_frequency(["navy"], ["olive", "teal"]) == ["navy", "olive", "teal"]
    assert merge_by_frequency(["a", "b", "c"], []) == ["a", "b", "c"]


def test_merge_with_no_incoming_keeps_the_same_elements() -> None:
    existing = ["casual", "modern", "casual", "vintage"]
    merged = merge_by_frequency(existing, [])
    assert set(merged) == set(existing)
    assert merged[0] == "casual"


def test_update_preferences_merges_each_provided_list() -> None:
    preference = StylePreference(
        user_id="u1", favorite_colors=["black"], favorite_styles=["casual"], favored_brands=["Acme"]
    )
    stamp = datetime(2024, 1, 2, 3, 4)

    preference.update_preferences(
        new_colors=["navy", "navy"],
        new_styles=["Modern"],
        new_fits=[FitPreference(category="tops", fit_type="slim")],
        now=stamp,
    )

    assert preference.favorite_colors == ["black", "navy"]
    assert preference.favorite_styles == ["casual", "modern"]
    assert preference.favored_brands == ["Acme"]
    assert preference.favored_fits == [FitPreference(category="tops", fit_type="slim")]
    assert preference.updated_at == stamp


def test_update_preferences_rejects_unknown_styles() -> None:
    preference = StylePreference(user_id="u1")
    with pytest.raises(ValueError):
        preference.update_preferences(new_styles=["grunge"])


def test_adventure_level_converges_geometrically() -> None:
    preference = StylePreference(user_id="u1", adventure_level=0.2)
    sample = 0.9
    for n in range(1, 11):
        level = preference.update_adventure_level(sample)
        assert abs(level - sample) == pytest.approx(abs(0.2 - sample) * 0.7**n)


def test_adventure_level_clamps_out_of_range_inputs() -> None:
    preference = StylePreference(user_id="u1", adventure_level=1.7)
    assert preference.update_adventure_level(1.0) == pytest.approx(1.0)

    preference = StylePreference(user_id="u2", adventure_level=0.5)
    assert preference.update_adventure_level(-3.0) == pytest.approx(0.35)


@pytest.mark.parametrize(
    ("response", "expected"),
    [
        ("liked", 0.55),
        ("disliked", 0.4),
        ("tried", 0.6),
        ("purchased", 0.6),
        ("saved", 0.53),
        ("ignored", 0.48),
    ],
)
def test_feedback_deltas_from_midpoint(response: str, expected: float) -> None:
    preference = StylePreference(user_id="u1", adventure_level=0.5)
    assert preference.apply_feedback_delta(response) == pytest.approx(expected)


def test_disliked_and_tried_land_exactly() -> None:
    assert StylePreference(user_id="u1").apply_feedback_delta("disliked") == 0.4
    assert StylePreference(user_id="u1").apply_feedback_delta("tried") == 0.6


def test_negative_feedback_never_drops_below_floor() -> None:
    preference = StylePreference(user_id="u1", adventure_level=0.5)
    for _ in range(20):
        assert preference.apply_feedback_delta("disliked") >= 0.1
    assert preference.adventure_level == pytest.approx(0.1)
    for _ in range(20):
        preference.apply_feedback_delta("ignored")
    assert preference.adventure_level == pytest.approx(0.1)


def test_positive_feedback_never_exceeds_cap() -> None:
    preference = StylePreference(user_id="u1", adventure_level=0.5)
    for response in ["liked", "tried"] * 15:
        assert preference.apply_feedback_delta(response) <= 1.0
    assert preference.adventure_level == pytest.approx(1.0)


def test_feedback_delta_clamps_corrupt_level_first() -> None:
    preference = StylePreference(user_id="u1", adventure_level=3.0)
    assert preference.apply_feedback_delta("disliked") == pytest.approx(0.9)
