"""Storage backends for the analysis log."""

from critique_engine.storage.backends import (
    AnalysisLogStore,
    AnalysisRun,
    CSVAnalysisLogStore,
    InMemoryAnalysisLogStore,
)

__all__ = [
    "AnalysisLogStore",
    "AnalysisRun",
    "CSVAnalysisLogStore",
    "InMemoryAnalysisLogStore",
]
