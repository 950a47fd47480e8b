"""Text normalization and tokenization for point comparison.

Used only for matching; never modifies the point text that is displayed or stored.
Deterministic, pure, no network.
"""

from __future__ import annotations

import re
import unicodedata

_POSSESSIVE_RE = re.compile(r"'s\b")
_NON_WORD_RE = re.compile(r"[^\w\s']")


def normalize_for_matching(text: str) -> str:
    """Normalize text for matching: NFKC, unify apostrophes/dashes, collapse whitespace."""
    if not text:
        return ""
    s = unicodedata.normalize("NFKC", text)
    # Unify apostrophes (U+2019, etc.) -> ASCII
    s = s.replace("\u2019", "'").replace("\u2018", "'").replace("\u2032", "'")
    # Unify en/em dash -> hyphen
    s = s.replace("\u2014", "-").replace("\u2013", "-")
    # Collapse whitespace and strip
    s = " ".join(s.split())
    return s


def tokenize(text: str) -> list[str]:
    """Lowercase word tokens with possessives and punctuation removed.

    >>> tokenize("The team's budget -- overruns!")
    ['the', 'team', 'budget', 'overruns']
    """
    s = normalize_for_matching(text).lower()
    s = _POSSESSIVE_RE.sub("", s)
    s = _NON_WORD_RE.sub(" ", s)
    return [token.strip("'") for token in s.split() if token.strip("'")]


def dice_coefficient(words1: set[str] | frozenset[str], words2: set[str] | frozenset[str]) -> float:
    """``2 * |A & B| / (|A| + |B|)``; 0.0 when both sets are empty."""
    total = len(words1) + len(words2)
    if total == 0:
        return 0.0
    return (2.0 * len(words1 & words2)) / total

