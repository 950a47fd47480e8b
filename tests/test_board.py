"""Tests for board collaborators."""

import json
from pathlib import Path

import pytest

from critique_engine.board import StaticBoard, load_board
from critique_engine.models import ThemeColor


def _write(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_load_board(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "board.json",
        {
            "design_challenge": "Museum entrance",
            "decisions": ["One entrance", "Stairs"],
            "consensus_points": ["Keep the lobby"],
            "themes": [
                {"name": "Accessibility", "color": "light_blue", "id": "t1"},
                {"name": "Cost"},
                {},
            ],
        },
    )

    board = load_board(path)

    assert board.design_challenge == "Museum entrance"
    assert board.decisions == ("One entrance", "Stairs")
    assert board.consensus_points == ("Keep the lobby",)
    assert [theme.name for theme in board.themes] == ["Accessibility", "Cost", "Theme 3"]
    assert board.themes[0].color is ThemeColor.LIGHT_BLUE
    assert board.themes[0].theme_id == "t1"
    # Missing colors come from the palette in order
    assert board.themes[1].color is ThemeColor.LIGHT_BLUE
    assert board.themes[2].color is ThemeColor.LIGHT_YELLOW


def test_load_board_all_keys_optional(tmp_path: Path) -> None:
    board = load_board(_write(tmp_path / "board.json", {}))

    assert board.design_challenge == ""
    assert board.decisions == ()
    assert board.themes == []


def test_load_board_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_board(tmp_path / "missing.json")


def test_load_board_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "board.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid board JSON"):
        load_board(path)


def test_load_board_not_an_object(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="JSON object"):
        load_board(_write(tmp_path / "board.json", ["a", "b"]))


@pytest.mark.asyncio
async def test_static_board_reads_and_records_artifacts() -> None:
    board = StaticBoard(design_challenge="Challenge", consensus_points=["Agreed"])

    assert await board.get_design_challenge() == "Challenge"
    assert await board.get_consensus_points() == ("Agreed",)
    assert await board.get_current_themes() == []
    assert await board.create_response_artifact("Point one") is True
    assert board.artifacts == ["Point one"]
