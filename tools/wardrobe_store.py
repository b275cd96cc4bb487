"""Wardrobe storage abstractions and SQLite implementation."""
from __future__ import annotations

import json
import sqlite3
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from models.clothing_item import ClothingItem
from models.outfit import Outfit


class WardrobeStore:
    """Persistence interface for clothing items and outfits."""

    def create_item(self, item: ClothingItem) -> ClothingItem:
        raise NotImplementedError

    def get_item(self, item_id: str) -> Optional[ClothingItem]:
        raise NotImplementedError

    def list_items(self) -> List[ClothingItem]:
        raise NotImplementedError

    def update_item(self, item_id: str, updated_fields: Dict[str, object]) -> Optional[ClothingItem]:
        raise NotImplementedError

    def delete_item(self, item_id: str) -> bool:
        raise NotImplementedError

    def create_outfit(self, outfit: Outfit) -> Outfit:
        raise NotImplementedError

    def get_outfit(self, outfit_id: str) -> Optional[Outfit]:
        raise NotImplementedError

    def list_outfits(self) -> List[Outfit]:
        raise NotImplementedError

    def delete_outfit(self, outfit_id: str) -> bool:
        raise NotImplementedError

    def mark_outfit_worn(self, outfit_id: str, now: Optional[datetime] = None) -> Optional[Outfit]:
        raise NotImplementedError


def _dt(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_dt(raw: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(raw) if raw else None


class SQLiteWardrobeStore(WardrobeStore):
    """Local SQLite-backed store for the wardrobe catalogue.

    Outfit membership lives in a link table. Deleting an item removes its
    links explicitly before the item row, so outfits never reference missing
    items.
    """

    def __init__(self, database_path: str | Path = "data/wardrobe.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS clothing_items (
                    item_id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    category TEXT NOT NULL,
                    color TEXT NOT NULL,
                    brand TEXT,
                    subcategory TEXT,
                    size TEXT,
                    notes TEXT,
                    min_temperature REAL,
                    max_temperature REAL,
                    conditions TEXT,
                    style_tags TEXT,
                    wear_count INTEGER DEFAULT 0,
                    last_worn TEXT,
                    favorite INTEGER DEFAULT 0,
                    date_added TEXT
                );
                CREATE TABLE IF NOT EXISTS outfits (
                    outfit_id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    date_created TEXT,
                    last_worn TEXT,
                    wear_count INTEGER DEFAULT 0,
                    favorite INTEGER DEFAULT 0,
                    notes TEXT,
                    min_temperature REAL,
                    max_temperature REAL,
                    weather_tags TEXT,
                    style_tags TEXT,
                    rating INTEGER
                );
                CREATE TABLE IF NOT EXISTS outfit_items (
                    outfit_id TEXT NOT NULL,
                    item_id TEXT NOT NULL,
                    position INTEGER NOT NULL,
                    PRIMARY KEY (outfit_id, item_id),
                    FOREIGN KEY(outfit_id) REFERENCES outfits(outfit_id),
                    FOREIGN KEY(item_id) REFERENCES clothing_items(item_id)
                );
                """
            )

    @staticmethod
    def _serialise_list(values: Optional[List[object]]) -> str:
        return json.dumps(values or [])

    @staticmethod
    def _deserialise_list(raw: str) -> List[object]:
        return json.loads(raw) if raw else []

    def _write_item(self, conn: sqlite3.Connection, item: ClothingItem) -> None:
        conn.execute(
            """
            INSERT OR REPLACE INTO clothing_items (
                item_id, name, category, color, brand, subcategory, size, notes,
                min_temperature, max_temperature, conditions, style_tags,
                wear_count, last_worn, favorite, date_added
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                item.item_id,
                item.name,
                item.category,
                item.color,
                item.brand,
                item.subcategory,
                item.size,
                item.notes,
                item.min_temperature,
                item.max_temperature,
                self._serialise_list(item.conditions),
                self._serialise_list(item.style_tags),
                item.wear_count,
                _dt(item.last_worn),
                int(item.favorite),
                _dt(item.date_added),
            ),
        )

    def create_item(self, item: ClothingItem) -> ClothingItem:
        with self._connect() as conn:
            self._write_item(conn, item)
        return item

    def _row_to_item(self, row: sqlite3.Row) -> ClothingItem:
        return ClothingItem(
            item_id=row["item_id"],
            name=row["name"],
            category=row["category"],
            color=row["color"],
            brand=row["brand"],
            subcategory=row["subcategory"],
            size=row["size"],
            notes=row["notes"],
            min_temperature=row["min_temperature"],
            max_temperature=row["max_temperature"],
            conditions=self._deserialise_list(row["conditions"]),
            style_tags=self._deserialise_list(row["style_tags"]),
            wear_count=row["wear_count"],
            last_worn=_parse_dt(row["last_worn"]),
            favorite=bool(row["favorite"]),
            date_added=_parse_dt(row["date_added"]) or datetime.now(),
        )

    def get_item(self, item_id: str) -> Optional[ClothingItem]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM clothing_items WHERE item_id = ?", (item_id,)).fetchone()
            return self._row_to_item(row) if row else None

    def list_items(self) -> List[ClothingItem]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM clothing_items ORDER BY date_added, item_id").fetchall()
            return [self._row_to_item(row) for row in rows]

    def update_item(self, item_id: str, updated_fields: Dict[str, object]) -> Optional[ClothingItem]:
        current = self.get_item(item_id)
        if not current:
            return None

        for key, value in updated_fields.items():
            if key == "item_id":
                continue
            if hasattr(current, key):
                setattr(current, key, value)

        validated = ClothingItem(**asdict(current))
        return self.create_item(validated)

    def delete_item(self, item_id: str) -> bool:
        with self._connect() as conn:
            conn.execute("DELETE FROM outfit_items WHERE item_id = ?", (item_id,))
            cursor = conn.execute("DELETE FROM clothing_items WHERE item_id = ?", (item_id,))
            return cursor.rowcount > 0

    def _write_outfit(self, conn: sqlite3.Connection, outfit: Outfit) -> None:
        conn.execute(
            """
            INSERT OR REPLACE INTO outfits (
                outfit_id, name, date_created, last_worn, wear_count, favorite, notes,
                min_temperature, max_temperature, weather_tags, style_tags, rating
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                outfit.outfit_id,
                outfit.name,
                _dt(outfit.date_created),
                _dt(outfit.last_worn),
                outfit.wear_count,
                int(outfit.favorite),
                outfit.notes,
                outfit.min_temperature,
                outfit.max_temperature,
                self._serialise_list(outfit.weather_tags),
                self._serialise_list(outfit.style_tags),
                outfit.rating,
            ),
        )
        conn.execute("DELETE FROM outfit_items WHERE outfit_id = ?", (outfit.outfit_id,))
        for position, item in enumerate(outfit.items):
            self._write_item(conn, item)
            conn.execute(
                "INSERT INTO outfit_items (outfit_id, item_id, position) VALUES (?, ?, ?)",
                (outfit.outfit_id, item.item_id, position),
            )

    def create_outfit(self, outfit: Outfit) -> Outfit:
        with self._connect() as conn:
            self._write_outfit(conn, outfit)
        return outfit

    def _row_to_outfit(self, conn: sqlite3.Connection, row: sqlite3.Row) -> Outfit:
        item_rows = conn.execute(
            """
            SELECT clothing_items.* FROM outfit_items
            JOIN clothing_items ON clothing_items.item_id = outfit_items.item_id
            WHERE outfit_items.outfit_id = ?
            ORDER BY outfit_items.position
            """,
            (row["outfit_id"],),
        ).fetchall()
        return Outfit(
            outfit_id=row["outfit_id"],
            name=row["name"],
            items=[self._row_to_item(item_row) for item_row in item_rows],
            date_created=_parse_dt(row["date_created"]) or datetime.now(),
            last_worn=_parse_dt(row["last_worn"]),
            wear_count=row["wear_count"],
            favorite=bool(row["favorite"]),
            notes=row["notes"],
            min_temperature=row["min_temperature"],
            max_temperature=row["max_temperature"],
            weather_tags=self._deserialise_list(row["weather_tags"]),
            style_tags=self._deserialise_list(row["style_tags"]),
            rating=row["rating"],
        )

    def get_outfit(self, outfit_id: str) -> Optional[Outfit]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM outfits WHERE outfit_id = ?", (outfit_id,)).fetchone()
            return self._row_to_outfit(conn, row) if row else None

    def list_outfits(self) -> List[Outfit]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM outfits ORDER BY date_created, outfit_id").fetchall()
            return [self._row_to_outfit(conn, row) for row in rows]

    def delete_outfit(self, outfit_id: str) -> bool:
        with self._connect() as conn:
            conn.execute("DELETE FROM outfit_items WHERE outfit_id = ?", (outfit_id,))
            cursor = conn.execute("DELETE FROM outfits WHERE outfit_id = ?", (outfit_id,))
            return cursor.rowcount > 0

    def mark_outfit_worn(self, outfit_id: str, now: Optional[datetime] = None) -> Optional[Outfit]:
        outfit = self.get_outfit(outfit_id)
        if not outfit:
            return None
        outfit.mark_as_worn(now)
        return self.create_outfit(outfit)


__all__ = ["WardrobeStore", "SQLiteWardrobeStore"]
