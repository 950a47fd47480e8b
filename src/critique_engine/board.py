"""Board collaborators: where decisions, consensus and themes come from, and
where critique points are sent back to.

The engine reads one snapshot of the board at session start and never polls.
``StaticBoard`` serves that snapshot from memory (or from a JSON board export
via ``load_board``) and records every artifact written back.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from critique_engine.models import PointSet, Theme

logger = logging.getLogger(__name__)


class BoardReader(ABC):
    @abstractmethod
    async def get_design_challenge(self) -> str:
        pass

    @abstractmethod
    async def get_consensus_points(self) -> PointSet:
        pass

    @abstractmethod
    async def get_current_themes(self) -> list[Theme]:
        pass


class BoardWriter(ABC):
    @abstractmethod
    async def create_response_artifact(self, text: str) -> bool:
        """Create one artifact (sticky note) holding ``text``.

        Returns:
            True when the board acknowledged the artifact.
        """
        pass


class StaticBoard(BoardReader, BoardWriter):
    """In-memory board.

    Args:
        design_challenge: Challenge text.
        decisions: Design decision sticky notes (input to the analysis).
        consensus_points: Agreements the critique must respect.
        themes: Themes in display order.
    """

    def __init__(
        self,
        design_challenge: str = "",
        decisions: Sequence[str] = (),
        consensus_points: Sequence[str] = (),
        themes: Sequence[Theme] = (),
    ) -> None:
        self.design_challenge = design_challenge
        self.decisions: PointSet = tuple(decisions)
        self.consensus_points: PointSet = tuple(consensus_points)
        self.themes: list[Theme] = list(themes)
        self.artifacts: list[str] = []

    async def get_design_challenge(self) -> str:
        return self.design_challenge

    async def get_consensus_points(self) -> PointSet:
        return self.consensus_points

    async def get_current_themes(self) -> list[Theme]:
        return list(self.themes)

    async def create_response_artifact(self, text: str) -> bool:
        self.artifacts.append(text)
        return True

    @classmethod
    def from_dict(cls, d: dict) -> StaticBoard:
        return cls(
            design_challenge=str(d.get("design_challenge", "")),
            decisions=[str(x) for x in d.get("decisions", [])],
            consensus_points=[str(x) for x in d.get("consensus_points", [])],
            themes=[Theme.from_dict(t, index=i) for i, t in enumerate(d.get("themes", []))],
        )


def load_board(path: Path | str) -> StaticBoard:
    """Load a board export.

    Expected JSON layout::

        {
          "design_challenge": "...",
          "decisions": ["...", ...],
          "consensus_points": ["...", ...],
          "themes": [{"name": "...", "color": "light_blue", "id": "..."}, ...]
        }

    Every key is optional.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a JSON object.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Board file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid board JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Board file {path} must contain a JSON object")

    board = StaticBoard.from_dict(data)
    logger.info(
        f"Loaded board {path.name}: {len(board.decisions)} decisions, "
        f"{len(board.consensus_points)} consensus points, {len(board.themes)} themes"
    )
    return board
