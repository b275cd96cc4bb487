"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.clothing_item import ClothingItem, from_raw_metadata
from models.outfit import Outfit
from models.style_board import StyleBoard
from models.style_feedback import FeedbackContext, StyleFeedback
from models.style_preference import FitPreference, StylePreference, merge_by_frequency

__all__ = [
    "ClothingItem",
    "FeedbackContext",
    "FitPreference",
    "Outfit",
    "StyleBoard",
    "StyleFeedback",
    "StylePreference",
    "from_raw_metadata",
    "merge_by_frequency",
]
