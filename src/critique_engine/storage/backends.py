"""Analysis log backends.

Every successful variant generation is appended to the log as one run; the
full history feeds the synthesized point set.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd

from critique_engine.constants import (
    ANALYSIS_LOG_COLUMNS,
    POINT,
    POINT_INDEX,
    RUN_ID,
    SIMPLIFICATION,
    TIMESTAMP,
    TONE,
)
from critique_engine.errors import PersistenceFailure
from critique_engine.models import PointSet, SimplificationLevel, Tone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisRun:
    """One persisted point set.

    Attributes:
        run_id: Unique run identifier.
        points: The persisted points, in display order.
        tone: Tone of the variant the points came from.
        simplification: Simplification level of that variant.
        timestamp: UTC time of persistence (ISO 8601).
    """

    run_id: str
    points: PointSet
    tone: Tone
    simplification: SimplificationLevel
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class AnalysisLogStore(ABC):
    """Contract of the analysis log store.

    **Core Methods (Required):**
        - ``append_run(run)``: durably add one run
        - ``load_runs()``: every run, oldest first

    ``persist`` and ``load_all_historical_point_sets`` are the async entry
    points the engine uses. Implementations report any failure as
    ``PersistenceFailure``; the engine logs it and carries on.
    """

    @abstractmethod
    def append_run(self, run: AnalysisRun) -> None:
        """Append one run to the log.

        Raises:
            PersistenceFailure: If the run could not be written.
        """
        pass

    @abstractmethod
    def load_runs(self) -> list[AnalysisRun]:
        """Load every run, oldest first. An absent log is an empty log.

        Raises:
            PersistenceFailure: If the log exists but could not be read.
        """
        pass

    async def persist(
        self,
        points: Sequence[str],
        tone: Tone,
        simplification: SimplificationLevel,
    ) -> AnalysisRun:
        """Persist a point set as a new run."""
        run = AnalysisRun(
            run_id=uuid.uuid4().hex,
            points=tuple(points),
            tone=Tone(tone),
            simplification=SimplificationLevel(simplification),
        )
        await asyncio.to_thread(self.append_run, run)
        logger.debug(f"Persisted run {run.run_id} ({len(run.points)} points)")
        return run

    async def load_all_historical_point_sets(self) -> list[PointSet]:
        """Every persisted point set, oldest first."""
        runs = await asyncio.to_thread(self.load_runs)
        return [run.points for run in runs]


class InMemoryAnalysisLogStore(AnalysisLogStore):
    """Process-local log, mainly for tests and dry runs."""

    def __init__(self, runs: Sequence[AnalysisRun] | None = None) -> None:
        self._runs: list[AnalysisRun] = list(runs or [])

    def append_run(self, run: AnalysisRun) -> None:
        self._runs.append(run)

    def load_runs(self) -> list[AnalysisRun]:
        return list(self._runs)

    def __len__(self) -> int:
        return len(self._runs)


class CSVAnalysisLogStore(AnalysisLogStore):
    """CSV file log with one row per point (long format)."""

    def __init__(self, csv_path: Path | str) -> None:
        """Initialize CSV log store.

        Args:
            csv_path: Path to the CSV file. Created on first write.
        """
        self.path = Path(csv_path)
        # Background persists run in worker threads; header check and append
        # must not interleave.
        self._lock = threading.Lock()

    def exists(self) -> bool:
        """Check if the CSV file exists."""
        return self.path.exists()

    def _read(self) -> pd.DataFrame:
        if not self.path.exists():
            return pd.DataFrame(columns=ANALYSIS_LOG_COLUMNS)
        try:
            df = pd.read_csv(self.path, dtype={RUN_ID: str, POINT: str}, keep_default_na=False)
        except pd.errors.EmptyDataError:
            return pd.DataFrame(columns=ANALYSIS_LOG_COLUMNS)
        except (OSError, ValueError) as e:
            raise PersistenceFailure(f"Failed to read analysis log {self.path}: {e}") from e

        missing = [col for col in ANALYSIS_LOG_COLUMNS if col not in df.columns]
        if missing:
            raise PersistenceFailure(f"Analysis log {self.path} missing columns: {missing}")
        return df

    def append_run(self, run: AnalysisRun) -> None:
        rows = pd.DataFrame(
            {
                RUN_ID: [run.run_id] * len(run.points),
                TIMESTAMP: [run.timestamp] * len(run.points),
                TONE: [run.tone.value] * len(run.points),
                SIMPLIFICATION: [run.simplification.value] * len(run.points),
                POINT_INDEX: list(range(len(run.points))),
                POINT: list(run.points),
            },
            columns=ANALYSIS_LOG_COLUMNS,
        )
        try:
            with self._lock:
                write_header = not self.path.exists() or self.path.stat().st_size == 0
                self.path.parent.mkdir(parents=True, exist_ok=True)
                rows.to_csv(self.path, mode="a", header=write_header, index=False)
        except OSError as e:
            raise PersistenceFailure(f"Failed to append to analysis log {self.path}: {e}") from e

    def load_runs(self) -> list[AnalysisRun]:
        with self._lock:
            df = self._read()
        if df.empty:
            return []

        df = df[df[POINT].astype(str).str.strip() != ""]
        # unique() keeps order of first appearance
        runs = []
        for run_id in df[RUN_ID].unique():
            rows = df[df[RUN_ID] == run_id]
            try:
                rows = rows.assign(**{POINT_INDEX: pd.to_numeric(rows[POINT_INDEX])})
                rows = rows.sort_values(POINT_INDEX, kind="stable")
                first = rows.iloc[0]
                run = AnalysisRun(
                    run_id=str(run_id),
                    points=tuple(rows[POINT].astype(str)),
                    tone=Tone(first[TONE]),
                    simplification=SimplificationLevel(first[SIMPLIFICATION]),
                    timestamp=str(first[TIMESTAMP]),
                )
            except (ValueError, TypeError) as e:
                raise PersistenceFailure(
                    f"Analysis log {self.path} has an unreadable run {run_id!r}: {e}"
                ) from e
            runs.append(run)
        return runs
