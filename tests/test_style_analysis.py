"""Inspiration board aggregation and preference merging."""

from __future__ import annotations

from pathlib import Path

import pytest

from closet_app.app import ClosetCuratorApp
from closet_app.config import AppConfig
from memory.preference_store import JSONPreferenceStore
from models.style_board import StyleBoard
from models.style_preference import StylePreference
from tools.style_analysis import StaticStyleAnalyzer, StyleAnalysisResult, StyleAnalysisService
from tools.wardrobe_store import SQLiteWardrobeStore
from tools.weather_provider import MockWeatherProvider


def _analyzer() -> StaticStyleAnalyzer:
    return StaticStyleAnalyzer(
        {
            "img-1": StyleAnalysisResult(
                colors=["black", "white", "red"], styles=["casual", "modern"], categories=["tops", "bottoms"]
            ),
            "img-2": StyleAnalysisResult(
                colors=["black", "blue", "green", "yellow"], styles=["casual", "vintage"], categories=["tops"]
            ),
            "img-3": StyleAnalysisResult(
                colors=["white", "black", "purple"], styles=["Modern", "grunge"], categories=["dresses", "hats"]
            ),
        }
    )


def _board() -> StyleBoard:
    return StyleBoard(name="Autumn mood", images=["img-1", "img-2", "img-3"])


def test_board_keeps_most_frequent_colours_and_styles() -> None:
    board = StyleAnalysisService(_analyzer()).analyze_board(_board())

    assert board.dominant_colors == ["black", "white", "red", "blue", "green"]
    assert board.detected_styles == ["casual", "modern", "vintage"]
    assert board.detected_items == {"tops": 2, "bottoms": 1, "dresses": 1}


def test_analysis_merges_into_preference() -> None:
    preference = StylePreference(user_id="u1", favorite_colors=["blue"])

    board = StyleAnalysisService(_analyzer()).analyze_board(_board(), preference)

    assert preference.favorite_colors == ["blue", "black", "white", "red", "green"]
    assert preference.favorite_styles == ["casual", "modern", "vintage"]
    assert board.preference_id == preference.preference_id


def test_unknown_images_produce_empty_analysis() -> None:
    board = StyleAnalysisService(_analyzer()).analyze_board(StyleBoard(name="Blank", images=["nope"]))

    assert board.dominant_colors == []
    assert board.detected_styles == []
    assert board.detected_items == {}


def test_app_persists_board_analysis(tmp_path: Path) -> None:
    config = AppConfig(
        wardrobe_db_path=str(tmp_path / "wardrobe.db"), preference_store_path=str(tmp_path / "preferences")
    )
    curator = ClosetCuratorApp(config, weather_provider=MockWeatherProvider(), style_analyzer=_analyzer())

    curator.analyze_style_board("u1", _board())

    stored = JSONPreferenceStore(tmp_path / "preferences").load("u1")
    assert stored.favorite_colors[:2] == ["black", "white"]
    assert stored.favorite_styles == ["casual", "modern", "vintage"]


def test_app_without_analyzer_refuses_board_analysis(tmp_path: Path) -> None:
    curator = ClosetCuratorApp(
        AppConfig(preference_store_path=str(tmp_path / "p")),
        weather_provider=MockWeatherProvider(),
        wardrobe_store=SQLiteWardrobeStore(tmp_path / "w.db"),
    )
    with pytest.raises(RuntimeError):
        curator.analyze_style_board("u1", _board())
