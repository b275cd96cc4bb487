"""Feedback processing: recommendation responses nudge the adventure level."""

from __future__ import annotations

import logging
from typing import Optional

from closet_app.logging_config import get_logger, log_event
from memory.preference_store import PreferenceManager
from models.style_feedback import StyleFeedback
from models.style_preference import FEEDBACK_DELTAS, StylePreference
from models.taxonomy import validate_response

LOGGER = get_logger(__name__)


def adventure_delta(response: str) -> float:
    """Additive change applied to the adventure level for ``response``."""

    return FEEDBACK_DELTAS[validate_response(response)][0]


class FeedbackProcessor:
    """Applies feedback to a style preference and keeps the event as history."""

    def __init__(self, preference_manager: Optional[PreferenceManager] = None) -> None:
        self.preference_manager = preference_manager

    def process(self, feedback: StyleFeedback, preference: StylePreference) -> StylePreference:
        """Apply the response delta to ``preference`` in place and return it."""

        before = preference.adventure_level
        preference.apply_feedback_delta(feedback.response, now=feedback.context.time)
        log_event(
            LOGGER,
            logging.INFO,
            "feedback_applied",
            feedback_id=feedback.feedback_id,
            response=feedback.response,
            adventure_before=before,
            adventure_after=preference.adventure_level,
        )
        return preference

    def record(self, user_id: str, feedback: StyleFeedback) -> StylePreference:
        """Apply and persist feedback under the preference's single-writer lock."""

        if self.preference_manager is None:
            raise RuntimeError("FeedbackProcessor.record requires a PreferenceManager")

        def _apply(preference: StylePreference) -> None:
            if feedback.preference_id != preference.preference_id:
                raise ValueError(
                    f"Feedback {feedback.feedback_id} belongs to preference {feedback.preference_id}, "
                    f"not {preference.preference_id}"
                )
            self.process(feedback, preference)
            self.preference_manager.store.append_feedback(user_id, feedback)

        return self.preference_manager.mutate(user_id, _apply)


__all__ = ["FeedbackProcessor", "adventure_delta"]
