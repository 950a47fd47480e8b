"""Tests for the command line interface."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pandas as pd
from typer.testing import CliRunner

from critique_engine.cli import _print_snapshot, app
from critique_engine.llm.base import LLMResponse
from critique_engine.models import (
    SessionSnapshot,
    SessionState,
    Theme,
    ThemedGrouping,
    ThemeGroup,
)

runner = CliRunner()

ANALYSIS = "Stairs exclude wheelchair users ** ** Single entrance causes congestion"
SIMPLIFIED = "Stairs block wheelchairs ** ** Entrance too crowded"
AGGRESSIVE = "Stairs are unacceptable ** ** The entrance is a disaster"


def _fake_provider() -> MagicMock:
    def complete(prompt, system_prompt=None, **kwargs):
        if system_prompt.startswith("You are analyzing"):
            content = ANALYSIS
        elif system_prompt.startswith("Please simplify"):
            content = SIMPLIFIED
        else:
            content = AGGRESSIVE
        return LLMResponse(content, "fake-model", 10, 5, 0.001)

    provider = MagicMock()
    provider.model = "fake-model"
    provider.complete.side_effect = complete
    return provider


def _board(tmp_path: Path, **extra) -> Path:
    data = {
        "design_challenge": "Museum entrance",
        "decisions": ["Use a single entrance", "Replace the ramp with stairs"],
        "consensus_points": ["Keep the lobby"],
    }
    data.update(extra)
    path = tmp_path / "board.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def _invoke(args, provider=None):
    with patch("critique_engine.cli.get_provider", return_value=provider or _fake_provider()):
        return runner.invoke(app, args)


def test_critique_prints_points_and_logs(tmp_path: Path) -> None:
    log_path = tmp_path / "log.csv"

    result = _invoke(["critique", str(_board(tmp_path)), "--log-path", str(log_path)])

    assert result.exit_code == 0, result.output
    assert "Stairs exclude wheelchair users" in result.output
    assert "1 generation calls" in result.output
    assert len(pd.read_csv(log_path)) == 2


def test_critique_simplified_aggressive_json(tmp_path: Path) -> None:
    result = _invoke(
        [
            "critique",
            str(_board(tmp_path)),
            "--simplified",
            "--tone",
            "aggressive",
            "--json",
            "--log-path",
            str(tmp_path / "log.csv"),
        ]
    )

    assert result.exit_code == 0, result.output
    assert '"state": "ready"' in result.output
    assert '"tone": "aggressive"' in result.output
    assert "Stairs are unacceptable" in result.output
    assert "3 generation calls" in result.output


def test_critique_themed_groups_points(tmp_path: Path) -> None:
    board = _board(tmp_path, themes=[{"name": "Wheelchair access"}, {"name": "Entrance flow"}])

    result = _invoke(
        ["critique", str(board), "--themed", "--log-path", str(tmp_path / "log.csv")]
    )

    assert result.exit_code == 0, result.output
    assert "[Wheelchair access]" in result.output
    assert "[Entrance flow]" in result.output


def test_themed_output_keeps_groups_sharing_a_name(capsys) -> None:
    grouping = ThemedGrouping(
        (
            ThemeGroup(Theme("Access"), ("Stairs exclude wheelchair users",)),
            ThemeGroup(Theme("Access", selected=False), ("Single entrance causes congestion",)),
        )
    )
    snapshot = SessionSnapshot(SessionState.READY, themed_grouping=grouping)

    _print_snapshot(snapshot)

    out = capsys.readouterr().out
    assert out.count("[Access]") == 2
    assert "[Access] (deselected)" in out
    assert "Stairs exclude wheelchair users" in out
    assert "Single entrance causes congestion" in out


def test_critique_publish_writes_artifacts(tmp_path: Path) -> None:
    board = _board(tmp_path)

    result = _invoke(
        ["critique", str(board), "--publish", "--log-path", str(tmp_path / "log.csv")]
    )

    assert result.exit_code == 0, result.output
    data = json.loads(board.read_text(encoding="utf-8"))
    assert data["artifacts"] == [
        "Stairs exclude wheelchair users",
        "Single entrance causes congestion",
    ]


def test_critique_missing_board(tmp_path: Path) -> None:
    result = _invoke(["critique", str(tmp_path / "missing.json")])
    assert result.exit_code == 1


def test_critique_board_without_decisions(tmp_path: Path) -> None:
    result = _invoke(["critique", str(_board(tmp_path, decisions=[]))])
    assert result.exit_code == 1


def test_critique_provider_init_failure(tmp_path: Path) -> None:
    with patch("critique_engine.cli.get_provider", side_effect=ValueError("no key")):
        result = runner.invoke(app, ["critique", str(_board(tmp_path))])
    assert result.exit_code == 1


def test_critique_generation_failure(tmp_path: Path) -> None:
    provider = _fake_provider()
    provider.complete.side_effect = RuntimeError("rate limited")

    result = _invoke(
        ["critique", str(_board(tmp_path)), "--log-path", str(tmp_path / "log.csv")], provider
    )

    assert result.exit_code == 1
    assert not (tmp_path / "log.csv").exists()


def test_split_command(tmp_path: Path) -> None:
    path = tmp_path / "response.txt"
    path.write_text("A ** ** 1. B ** ** ", encoding="utf-8")

    result = runner.invoke(app, ["split", str(path)])

    assert result.exit_code == 0, result.output
    assert "2 points" in result.output
    assert " 1. A" in result.output
    assert " 2. B" in result.output


def test_split_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["split", str(tmp_path / "missing.txt")])
    assert result.exit_code == 1


def test_synthesize_command(tmp_path: Path) -> None:
    log_path = tmp_path / "log.csv"
    pd.DataFrame(
        {
            "run_id": ["r1", "r1", "r2"],
            "timestamp": ["t", "t", "t"],
            "tone": ["normal", "normal", "aggressive"],
            "simplification": ["full", "full", "full"],
            "point_index": [0, 1, 0],
            "point": [
                "Budget overruns are likely",
                "Accessibility was ignored",
                "Budget overruns likely occur",
            ],
        }
    ).to_csv(log_path, index=False)

    result = runner.invoke(app, ["synthesize", "--log-path", str(log_path)])

    assert result.exit_code == 0, result.output
    assert "Synthesized points (2)" in result.output
    assert "Budget overruns are likely" in result.output
    assert "Budget overruns likely occur" not in result.output


def test_synthesize_missing_log(tmp_path: Path) -> None:
    result = runner.invoke(app, ["synthesize", "--log-path", str(tmp_path / "missing.csv")])
    assert result.exit_code == 1
