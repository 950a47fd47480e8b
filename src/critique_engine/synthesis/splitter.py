"""Split raw generation text into critique points.

The generation backend is told to separate points with ``** **``. Models do not
always comply, so bullets and line breaks are treated as separators too.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from critique_engine.constants import BULLET_CHARACTERS, POINT_DELIMITER, POINT_JOINER
from critique_engine.models import PointSet

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")
# "- item" / "* item" at the start of a line
_LINE_BULLET_RE = re.compile(r"^[ \t]*[-*][ \t]+", re.MULTILINE)
# Repeated "1. " enumerations and stray "- " markers left at the start of a fragment
_LEADING_MARKER_RE = re.compile(r"^(?:\d+\.(?:\s+|$)|[-*](?:\s+|$))+")


def _normalize_separators(text: str) -> str:
    for bullet in BULLET_CHARACTERS:
        text = text.replace(bullet, POINT_DELIMITER)
    text = _LINE_BULLET_RE.sub(POINT_DELIMITER, text)
    return _LINE_BREAK_RE.sub(POINT_DELIMITER, text)


def clean_point(fragment: str) -> str:
    """Trim a fragment and strip leading enumeration/bullet markers."""
    return _LEADING_MARKER_RE.sub("", fragment.strip()).strip()


def split_points(text: str | None) -> PointSet:
    """Split generated text into an ordered point set.

    Never fails: empty input gives an empty point set, and text without any
    separator comes back as a single point.

    Args:
        text: Raw generation output.

    Returns:
        Tuple of non-empty points in their original order.

    Examples:
        >>> split_points("A ** ** 1. B ** ** ")
        ('A', 'B')
    """
    if not text:
        return ()

    normalized = _normalize_separators(text)
    points = (clean_point(fragment) for fragment in normalized.split(POINT_DELIMITER))
    return tuple(point for point in points if point)


def join_points(points: Iterable[str]) -> str:
    """Join points with the canonical separator (inverse of ``split_points``)."""
    return POINT_JOINER.join(points)
