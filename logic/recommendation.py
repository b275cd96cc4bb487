"""Ranked outfit recommendations with deterministic fallback synthesis.

Existing outfits are filtered, scored and ranked first. When fewer than the
requested number qualify, new combinations are assembled from the wardrobe's
items grouped by category, so a thin outfit catalogue still yields
suggestions. Synthesis never uses randomness: bases are ranked by how well
their items match the style preference.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

from logic.outfit_scoring import ACCEPTANCE_THRESHOLD, WEAR_PENALTY_PER_WEAR, WEIGHTS, qualifies, score_outfit
from models.clothing_item import ClothingItem
from models.outfit import Outfit
from models.style_preference import StylePreference
from models.taxonomy import CATEGORIES, STYLE_TAGS, WEATHER_TAGS, validate_tags

logger = logging.getLogger(__name__)

LAYERING_WEATHER = {"cool", "cold", "rainy", "snowy"}


@dataclass(frozen=True)
class Recommendation:
    outfit: Outfit
    score: float
    reason: str
    synthesized: bool = False


def item_affinity(item: ClothingItem, preference: StylePreference) -> float:
    """How strongly a single item matches the preference profile."""

    score = 0.0
    if item.color in preference.favorite_colors:
        score += WEIGHTS["color"]
    if item.brand and item.brand in preference.favored_brands:
        score += WEIGHTS["brand"]
    score += WEIGHTS["style"] * len(set(item.style_tags) & set(preference.favorite_styles))
    score -= item.wear_count * WEAR_PENALTY_PER_WEAR
    return score


def _group_by_category(items: Iterable[ClothingItem]) -> Dict[str, List[ClothingItem]]:
    grouped: Dict[str, List[ClothingItem]] = {category: [] for category in CATEGORIES}
    for item in items:
        grouped[item.category].append(item)
    return grouped


def _wardrobe_from_outfits(outfits: Iterable[Outfit]) -> List[ClothingItem]:
    seen: Set[str] = set()
    items: List[ClothingItem] = []
    for outfit in outfits:
        for item in outfit.items:
            if item.item_id not in seen:
                seen.add(item.item_id)
                items.append(item)
    return items


def _best(items: Sequence[ClothingItem], preference: StylePreference) -> Optional[ClothingItem]:
    if not items:
        return None
    # max() keeps the first of equal scores, so input order breaks ties
    return max(items, key=lambda item: item_affinity(item, preference))


def _describe_weather(weather_tags: Sequence[str]) -> str:
    return " and ".join(weather_tags)


def _synthesis_reason(base: Sequence[ClothingItem], occasion: Optional[str], weather_tags: Sequence[str]) -> str:
    names = " and ".join(item.name for item in base)
    if len(base) == 1:
        reason = f"{names} works as a complete outfit on its own"
    else:
        reason = f"This combination of {names} would work well together"
    context = []
    if occasion:
        context.append(f"a {occasion} occasion")
    if weather_tags:
        context.append(f"{_describe_weather(weather_tags)} weather")
    if context:
        reason += " for " + " in ".join(context)
    return reason


def _existing_reason(outfit: Outfit, preference: StylePreference, weather_tags: Sequence[str]) -> str:
    matched_styles = [tag for tag in outfit.style_tags if tag in preference.favorite_styles]
    matched_weather = [tag for tag in outfit.weather_tags if tag in weather_tags]
    if matched_styles and matched_weather:
        return f"Matches your {', '.join(matched_styles)} style and suits {_describe_weather(matched_weather)} weather"
    if matched_styles:
        return f"Matches your {', '.join(matched_styles)} style"
    if matched_weather:
        return f"Suits {_describe_weather(matched_weather)} weather"
    if outfit.favorite:
        return "One of your favorite outfits"
    return "A well-rested outfit you have not worn much lately"


class RecommendationGenerator:
    """Scores existing outfits and fills gaps with synthesized combinations."""

    def __init__(self, threshold: float = ACCEPTANCE_THRESHOLD) -> None:
        self.threshold = threshold

    def generate(
        self,
        candidate_outfits: Sequence[Outfit],
        weather_tags: Sequence[str],
        preference: StylePreference,
        limit: int,
        **kwargs,
    ) -> List[Outfit]:
        """Return at most ``limit`` outfits, real ones before synthesized ones."""

        return [entry.outfit for entry in self.rank(candidate_outfits, weather_tags, preference, limit, **kwargs)]

    def rank(
        self,
        candidate_outfits: Sequence[Outfit],
        weather_tags: Sequence[str],
        preference: StylePreference,
        limit: int,
        wardrobe_items: Optional[Sequence[ClothingItem]] = None,
        temperature: Optional[float] = None,
        occasion: Optional[str] = None,
        conditions: Optional[Sequence[str]] = None,
        now: Optional[datetime] = None,
    ) -> List[Recommendation]:
        if limit <= 0:
            return []
        now = now or datetime.now()
        weather_tags = validate_tags(weather_tags, WEATHER_TAGS, "weather tag")

        eligible = [
            outfit
            for outfit in candidate_outfits
            if outfit.is_valid and (temperature is None or outfit.is_suitable_for_temperature(temperature))
        ]
        logger.info("Filtered %s candidate outfits to %s eligible", len(candidate_outfits), len(eligible))

        scored: List[Recommendation] = []
        for outfit in eligible:
            score = score_outfit(outfit, weather_tags, preference, now=now)
            if qualifies(outfit, score, self.threshold):
                scored.append(
                    Recommendation(outfit=outfit, score=score, reason=_existing_reason(outfit, preference, weather_tags))
                )
        # sorted() is stable, so equal scores keep their input order
        ranked = sorted(scored, key=lambda entry: -entry.score)[:limit]
        logger.info("Ranked %s outfits above threshold %.2f", len(ranked), self.threshold)

        missing = limit - len(ranked)
        if missing > 0:
            wardrobe = list(wardrobe_items) if wardrobe_items is not None else _wardrobe_from_outfits(candidate_outfits)
            taken = [frozenset(outfit.item_ids) for outfit in candidate_outfits]
            ranked.extend(
                self.synthesize(
                    wardrobe,
                    weather_tags,
                    preference,
                    missing,
                    taken=taken,
                    temperature=temperature,
                    occasion=occasion,
                    conditions=conditions,
                    now=now,
                )
            )
        return ranked[:limit]

    def synthesize(
        self,
        wardrobe_items: Sequence[ClothingItem],
        weather_tags: Sequence[str],
        preference: StylePreference,
        count: int,
        taken: Optional[Sequence[FrozenSet[str]]] = None,
        temperature: Optional[float] = None,
        occasion: Optional[str] = None,
        conditions: Optional[Sequence[str]] = None,
        now: Optional[datetime] = None,
    ) -> List[Recommendation]:
        """Build up to ``count`` new outfits from categorized wardrobe items."""

        if count <= 0:
            return []
        weather_tags = validate_tags(weather_tags, WEATHER_TAGS, "weather tag")
        items = [
            item
            for item in wardrobe_items
            if (temperature is None or item.is_suitable_for_temperature(temperature))
            and (conditions is None or item.is_suitable_for_conditions(conditions))
        ]
        grouped = _group_by_category(items)
        if not (grouped["tops"] and grouped["bottoms"]) and not grouped["dresses"]:
            logger.info("Skipping synthesis: wardrobe lacks a top/bottom pair or a dress")
            return []

        bases: List[Tuple[ClothingItem, ...]] = [
            (top, bottom) for top in grouped["tops"] for bottom in grouped["bottoms"]
        ]
        bases.extend((dress,) for dress in grouped["dresses"])
        bases.sort(key=lambda base: -sum(item_affinity(item, preference) for item in base))

        shoes = _best(grouped["shoes"], preference)
        outerwear = _best(grouped["outerwear"], preference) if LAYERING_WEATHER & set(weather_tags) else None
        accessory = _best(grouped["accessories"], preference)

        taken = list(taken or ())
        results: List[Recommendation] = []
        for base in bases:
            if len(results) >= count:
                break
            key = frozenset(item.item_id for item in base)
            if any(key <= existing for existing in taken):
                continue
            taken.append(key)
            members = list(base) + [extra for extra in (shoes, outerwear, accessory) if extra is not None]
            style_tags = [tag for tag in STYLE_TAGS if any(tag in item.style_tags for item in members)]
            outfit = Outfit(
                name=" + ".join(item.name for item in base),
                items=members,
                weather_tags=weather_tags,
                style_tags=style_tags,
                synthesized=True,
                notes=_synthesis_reason(base, occasion, weather_tags),
                date_created=now or datetime.now(),
            )
            score = score_outfit(outfit, weather_tags, preference, now=now)
            results.append(Recommendation(outfit=outfit, score=score, reason=outfit.notes or "", synthesized=True))
        logger.info("Synthesized %s outfits from %s wardrobe items", len(results), len(items))
        return results


def generate_recommendations(
    candidate_outfits: Sequence[Outfit],
    weather_tags: Sequence[str],
    preference: StylePreference,
    limit: int = 5,
    **kwargs,
) -> List[Outfit]:
    """Functional shortcut around :class:`RecommendationGenerator`."""

    return RecommendationGenerator().generate(candidate_outfits, weather_tags, preference, limit, **kwargs)


__all__ = [
    "LAYERING_WEATHER",
    "Recommendation",
    "RecommendationGenerator",
    "generate_recommendations",
    "item_affinity",
]
