"""Style preference persistence and a manager that serialises mutation."""
from __future__ import annotations

import copy
import json
import sqlite3
import threading
import time
import weakref
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from models.style_feedback import FeedbackContext, StyleFeedback
from models.style_preference import FitPreference, StylePreference


def preference_to_dict(preference: StylePreference) -> Dict[str, Any]:
    return {
        "preference_id": preference.preference_id,
        "user_id": preference.user_id,
        "favorite_colors": list(preference.favorite_colors),
        "favorite_styles": list(preference.favorite_styles),
        "favored_brands": list(preference.favored_brands),
        "favored_fits": [{"category": fit.category, "fit_type": fit.fit_type} for fit in preference.favored_fits],
        "adventure_level": preference.adventure_level,
        "seasonal_preference": dict(preference.seasonal_preference),
        "created_at": preference.created_at.isoformat(),
        "updated_at": preference.updated_at.isoformat(),
    }


def preference_from_dict(payload: Dict[str, Any]) -> StylePreference:
    return StylePreference(
        user_id=payload["user_id"],
        preference_id=payload["preference_id"],
        favorite_colors=payload.get("favorite_colors", []),
        favorite_styles=payload.get("favorite_styles", []),
        favored_brands=payload.get("favored_brands", []),
        favored_fits=[FitPreference(**fit) for fit in payload.get("favored_fits", [])],
        adventure_level=payload.get("adventure_level", 0.5),
        seasonal_preference=payload.get("seasonal_preference", {}),
        created_at=datetime.fromisoformat(payload["created_at"]),
        updated_at=datetime.fromisoformat(payload["updated_at"]),
    )


def feedback_to_dict(feedback: StyleFeedback) -> Dict[str, Any]:
    return {
        "feedback_id": feedback.feedback_id,
        "recommendation_type": feedback.recommendation_type,
        "recommendation_id": feedback.recommendation_id,
        "response": feedback.response,
        "rating": feedback.rating,
        "preference_id": feedback.preference_id,
        "context": {
            "time": feedback.context.time.isoformat(),
            "weather": feedback.context.weather,
            "occasion": feedback.context.occasion,
        },
    }


def feedback_from_dict(payload: Dict[str, Any]) -> StyleFeedback:
    context = payload.get("context") or {}
    return StyleFeedback(
        feedback_id=payload["feedback_id"],
        recommendation_type=payload["recommendation_type"],
        recommendation_id=payload.get("recommendation_id"),
        response=payload["response"],
        rating=payload["rating"],
        preference_id=payload["preference_id"],
        context=FeedbackContext(
            time=datetime.fromisoformat(context["time"]) if context.get("time") else datetime.now(),
            weather=context.get("weather"),
            occasion=context.get("occasion"),
        ),
    )


class PreferenceStore:
    """Interface for style preference persistence."""

    def load(self, user_id: str) -> Optional[StylePreference]:
        raise NotImplementedError

    def save(self, preference: StylePreference) -> StylePreference:
        raise NotImplementedError

    def append_feedback(self, user_id: str, feedback: StyleFeedback) -> None:
        raise NotImplementedError

    def list_feedback(self, user_id: str, limit: Optional[int] = None) -> List[StyleFeedback]:
        raise NotImplementedError


class JSONPreferenceStore(PreferenceStore):
    """JSON-file-backed PreferenceStore suitable for local runs."""

    def __init__(self, base_dir: str | Path = "data/preferences") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, user_id: str) -> Path:
        path = (self.base_dir / f"{user_id}.json").resolve()
        if path.parent != self.base_dir.resolve():
            raise ValueError(f"Invalid user id for preference storage: {user_id!r}")
        return path

    def _load_record(self, user_id: str) -> Dict[str, Any]:
        path = self._path(user_id)
        if not path.exists():
            return {"preference": None, "feedback": []}
        return json.loads(path.read_text())

    def _save_record(self, user_id: str, record: Dict[str, Any]) -> None:
        self._path(user_id).write_text(json.dumps(record, indent=2))

    def load(self, user_id: str) -> Optional[StylePreference]:
        payload = self._load_record(user_id).get("preference")
        return preference_from_dict(payload) if payload else None

    def save(self, preference: StylePreference) -> StylePreference:
        record = self._load_record(preference.user_id)
        record["preference"] = preference_to_dict(preference)
        self._save_record(preference.user_id, record)
        return preference

    def append_feedback(self, user_id: str, feedback: StyleFeedback) -> None:
        record = self._load_record(user_id)
        record.setdefault("feedback", []).append(feedback_to_dict(feedback))
        self._save_record(user_id, record)

    def list_feedback(self, user_id: str, limit: Optional[int] = None) -> List[StyleFeedback]:
        entries = self._load_record(user_id).get("feedback", [])
        if limit is not None:
            entries = entries[-limit:] if limit > 0 else []
        return [feedback_from_dict(entry) for entry in entries]


class SQLitePreferenceStore(PreferenceStore):
    """SQLite-backed preference store for lightweight durability."""

    def __init__(self, db_path: str | Path = "data/preferences.db") -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS preferences (
                    user_id TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    updated_at REAL
                );
                CREATE TABLE IF NOT EXISTS feedback (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    feedback_id TEXT NOT NULL,
                    payload TEXT NOT NULL,
                    created_at REAL,
                    FOREIGN KEY(user_id) REFERENCES preferences(user_id)
                );
                """
            )

    def load(self, user_id: str) -> Optional[StylePreference]:
        with self._connect() as conn:
            row = conn.execute("SELECT payload FROM preferences WHERE user_id = ?", (user_id,)).fetchone()
        return preference_from_dict(json.loads(row["payload"])) if row else None

    def save(self, preference: StylePreference) -> StylePreference:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO preferences(user_id, payload, updated_at) VALUES (?, ?, ?)\n"
                "ON CONFLICT(user_id) DO UPDATE SET payload=excluded.payload, updated_at=excluded.updated_at",
                (preference.user_id, json.dumps(preference_to_dict(preference)), time.time()),
            )
        return preference

    def append_feedback(self, user_id: str, feedback: StyleFeedback) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO feedback(user_id, feedback_id, payload, created_at) VALUES (?, ?, ?, ?)",
                (user_id, feedback.feedback_id, json.dumps(feedback_to_dict(feedback)), time.time()),
            )

    def list_feedback(self, user_id: str, limit: Optional[int] = None) -> List[StyleFeedback]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT payload FROM feedback WHERE user_id = ? ORDER BY id ASC", (user_id,)
            ).fetchall()
        if limit is not None:
            rows = rows[-limit:] if limit > 0 else []
        return [feedback_from_dict(json.loads(row["payload"])) for row in rows]


class PreferenceManager:
    """Coordinates preference creation, snapshots and single-writer mutation.

    Every mutation of a user's preference runs under that user's lock, so
    concurrent feedback events cannot lose updates to the adventure level or
    the ranked lists. Readers get deep copies and never see a half-applied
    change. Locks are held weakly, so an idle user's lock is dropped once no
    caller holds it.
    """

    def __init__(self, store: PreferenceStore) -> None:
        self.store = store
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()
        self._registry_lock = threading.Lock()

    def _lock_for(self, user_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[user_id] = lock
            return lock

    def _load_or_create(self, user_id: str) -> StylePreference:
        preference = self.store.load(user_id)
        if preference is None:
            preference = self.store.save(StylePreference(user_id=user_id))
        return preference

    def get_or_create(self, user_id: str) -> StylePreference:
        with self._lock_for(user_id):
            return copy.deepcopy(self._load_or_create(user_id))

    def snapshot(self, user_id: str) -> StylePreference:
        """Read-only copy for scoring; changes to it are never persisted."""

        return self.get_or_create(user_id)

    def mutate(self, user_id: str, mutation: Callable[[StylePreference], Any]) -> StylePreference:
        with self._lock_for(user_id):
            preference = self._load_or_create(user_id)
            mutation(preference)
            self.store.save(preference)
            return copy.deepcopy(preference)

    def replace(self, preference: StylePreference) -> StylePreference:
        """Store an explicitly edited preference wholesale."""

        with self._lock_for(preference.user_id):
            self.store.save(preference)
            return copy.deepcopy(preference)

    def update_preferences(self, user_id: str, **updates: Any) -> StylePreference:
        return self.mutate(user_id, lambda preference: preference.update_preferences(**updates))

    def update_adventure_level(self, user_id: str, sample: float) -> StylePreference:
        return self.mutate(user_id, lambda preference: preference.update_adventure_level(sample))

    def feedback_history(self, user_id: str, limit: Optional[int] = None) -> List[StyleFeedback]:
        return self.store.list_feedback(user_id, limit=limit)


__all__ = [
    "JSONPreferenceStore",
    "PreferenceManager",
    "PreferenceStore",
    "SQLitePreferenceStore",
    "feedback_from_dict",
    "feedback_to_dict",
    "preference_from_dict",
    "preference_to_dict",
]
