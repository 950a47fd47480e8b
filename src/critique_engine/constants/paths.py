"""Data directory paths and file path builders.

All data paths should be imported from here to avoid magic strings.
"""

from pathlib import Path

# Base directories (relative to project root)
DATA_DIR = Path("data")

# Analysis history (one row per critique point)
ANALYSIS_LOG_PATH = DATA_DIR / "analysis_log.csv"
