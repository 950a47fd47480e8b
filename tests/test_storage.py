"""Tests for analysis log storage backends."""

import asyncio
from pathlib import Path

import pandas as pd
import pytest

from critique_engine.constants import ANALYSIS_LOG_COLUMNS, POINT, POINT_INDEX, RUN_ID
from critique_engine.errors import PersistenceFailure
from critique_engine.models import SimplificationLevel, Tone
from critique_engine.storage import AnalysisRun, CSVAnalysisLogStore, InMemoryAnalysisLogStore


def _run(run_id: str, *points: str, tone: Tone = Tone.NORMAL) -> AnalysisRun:
    return AnalysisRun(
        run_id=run_id,
        points=points,
        tone=tone,
        simplification=SimplificationLevel.FULL,
    )


def test_in_memory_store_keeps_order() -> None:
    """Test in-memory store returns runs oldest first."""
    store = InMemoryAnalysisLogStore()
    store.append_run(_run("a", "First"))
    store.append_run(_run("b", "Second"))

    assert [run.run_id for run in store.load_runs()] == ["a", "b"]
    assert len(store) == 2


def test_csv_store_missing_file_is_empty(tmp_path: Path) -> None:
    """Test CSV store treats an absent log as empty."""
    store = CSVAnalysisLogStore(tmp_path / "missing.csv")

    assert not store.exists()
    assert store.load_runs() == []


def test_csv_store_empty_file_is_empty(tmp_path: Path) -> None:
    """Test CSV store handles an empty file."""
    csv_path = tmp_path / "empty.csv"
    csv_path.write_text("")

    assert CSVAnalysisLogStore(csv_path).load_runs() == []


def test_csv_store_append_and_load(tmp_path: Path) -> None:
    """Test CSV store round-trips runs in long format."""
    csv_path = tmp_path / "nested" / "analysis_log.csv"
    store = CSVAnalysisLogStore(csv_path)

    store.append_run(_run("r1", "Costs, unclear", 'Say "no" to stairs'))
    store.append_run(_run("r2", "Timeline is tight", tone=Tone.AGGRESSIVE))

    df = pd.read_csv(csv_path)
    assert list(df.columns) == ANALYSIS_LOG_COLUMNS
    assert len(df) == 3

    runs = store.load_runs()
    assert [run.run_id for run in runs] == ["r1", "r2"]
    assert runs[0].points == ("Costs, unclear", 'Say "no" to stairs')
    assert runs[1].tone is Tone.AGGRESSIVE
    assert runs[1].simplification is SimplificationLevel.FULL


def test_csv_store_orders_points_by_index(tmp_path: Path) -> None:
    """Test points come back in their original order even if rows are shuffled."""
    csv_path = tmp_path / "log.csv"
    store = CSVAnalysisLogStore(csv_path)
    store.append_run(_run("r1", "A", "B", "C"))

    df = pd.read_csv(csv_path).iloc[::-1]
    df.to_csv(csv_path, index=False)

    assert store.load_runs()[0].points == ("A", "B", "C")


def test_csv_store_numeric_run_ids_stay_strings(tmp_path: Path) -> None:
    store = CSVAnalysisLogStore(tmp_path / "log.csv")
    store.append_run(_run("007", "Point"))

    assert store.load_runs()[0].run_id == "007"


def test_csv_store_skips_blank_points(tmp_path: Path) -> None:
    csv_path = tmp_path / "log.csv"
    store = CSVAnalysisLogStore(csv_path)
    store.append_run(_run("r1", "Kept"))

    df = pd.read_csv(csv_path, dtype={RUN_ID: str})
    blank = df.iloc[[0]].assign(**{POINT: "  ", POINT_INDEX: 1})
    pd.concat([df, blank]).to_csv(csv_path, index=False)

    assert store.load_runs()[0].points == ("Kept",)


def test_csv_store_missing_columns(tmp_path: Path) -> None:
    """Test CSV store reports a malformed log as PersistenceFailure."""
    csv_path = tmp_path / "bad.csv"
    csv_path.write_text("foo,bar\n1,2\n")

    with pytest.raises(PersistenceFailure, match="missing columns"):
        CSVAnalysisLogStore(csv_path).load_runs()


def test_csv_store_unwritable_path(tmp_path: Path) -> None:
    """Test a write failure surfaces as PersistenceFailure."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = CSVAnalysisLogStore(blocker / "log.csv")

    with pytest.raises(PersistenceFailure):
        store.append_run(_run("r1", "Point"))


@pytest.mark.asyncio
async def test_persist_and_load_point_sets(tmp_path: Path) -> None:
    """Test async entry points used by the engine."""
    store = CSVAnalysisLogStore(tmp_path / "log.csv")

    run = await store.persist(["One", "Two"], Tone.CRITICAL, SimplificationLevel.SIMPLIFIED)
    await store.persist(["Three"], "normal", "full")

    assert run.points == ("One", "Two")
    assert run.tone is Tone.CRITICAL
    assert len(run.run_id) == 32
    assert await store.load_all_historical_point_sets() == [("One", "Two"), ("Three",)]


@pytest.mark.asyncio
async def test_concurrent_persists_write_one_header(tmp_path: Path) -> None:
    """Test overlapping background persists on a fresh log keep a single header."""
    for attempt in range(25):
        csv_path = tmp_path / f"log_{attempt}.csv"
        store = CSVAnalysisLogStore(csv_path)

        await asyncio.gather(
            *(store.persist([f"Point {i}"], Tone.NORMAL, SimplificationLevel.FULL) for i in range(4))
        )

        lines = csv_path.read_text().splitlines()
        assert lines[0] == ",".join(ANALYSIS_LOG_COLUMNS)
        assert sum(1 for line in lines if line.startswith(f"{RUN_ID},")) == 1
        assert len(lines) == 5
        assert len(store.load_runs()) == 4


def test_csv_store_unknown_tone_is_persistence_failure(tmp_path: Path) -> None:
    """Test a row with a foreign tone is reported as PersistenceFailure, not ValueError."""
    csv_path = tmp_path / "log.csv"
    store = CSVAnalysisLogStore(csv_path)
    store.append_run(_run("r1", "Point"))
    csv_path.write_text(csv_path.read_text().replace(",normal,", ",friendly,"))

    with pytest.raises(PersistenceFailure, match="unreadable run 'r1'"):
        store.load_runs()


def test_csv_store_stray_header_row_is_persistence_failure(tmp_path: Path) -> None:
    """Test a header line in the middle of the log is reported as PersistenceFailure."""
    csv_path = tmp_path / "log.csv"
    store = CSVAnalysisLogStore(csv_path)
    store.append_run(_run("r1", "Point"))
    with csv_path.open("a") as f:
        f.write(",".join(ANALYSIS_LOG_COLUMNS) + "\n")

    with pytest.raises(PersistenceFailure):
        store.load_runs()
