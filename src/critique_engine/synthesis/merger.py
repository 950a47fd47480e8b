"""Merge near-duplicate critique points.

Points are compared pairwise by token-set overlap. Pairs above the threshold
are linked, and linking is transitive: if A~B and B~C then A, B and C end up in
one group even when A and C are dissimilar. Each group is represented by its
shortest point (earliest on ties), placed where the group first appears.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from critique_engine.constants import MERGE_SIMILARITY_THRESHOLD
from critique_engine.models import PointSet
from critique_engine.text_norm import dice_coefficient, normalize_for_matching, tokenize

logger = logging.getLogger(__name__)


class _DisjointSet:
    """Union-find whose root is always the smallest index in the set."""

    def __init__(self, size: int):
        self._parent = list(range(size))

    def find(self, i: int) -> int:
        while self._parent[i] != i:
            self._parent[i] = self._parent[self._parent[i]]
            i = self._parent[i]
        return i

    def union(self, i: int, j: int) -> None:
        root_i, root_j = self.find(i), self.find(j)
        if root_i == root_j:
            return
        if root_i < root_j:
            self._parent[root_j] = root_i
        else:
            self._parent[root_i] = root_j


def group_similar_points(
    points: Sequence[str],
    threshold: float = MERGE_SIMILARITY_THRESHOLD,
) -> list[list[int]]:
    """Group point indices by transitive similarity.

    Args:
        points: Points to compare.
        threshold: Pairs with similarity strictly above this are linked.

    Returns:
        Groups of indices; groups ordered by their first index, members ascending.

    Raises:
        ValueError: If threshold is outside [0, 1].
    """
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"threshold must be within [0, 1], got {threshold}")

    token_sets = [frozenset(tokenize(point)) for point in points]
    exact_keys = [normalize_for_matching(point).lower() for point in points]
    groups = _DisjointSet(len(points))

    for i in range(len(points)):
        for j in range(i + 1, len(points)):
            if groups.find(i) == groups.find(j):
                continue
            if exact_keys[i] == exact_keys[j]:
                groups.union(i, j)
            elif dice_coefficient(token_sets[i], token_sets[j]) > threshold:
                groups.union(i, j)

    by_root: dict[int, list[int]] = {}
    for i in range(len(points)):
        by_root.setdefault(groups.find(i), []).append(i)
    return list(by_root.values())


def merge_similar_points(
    points: Sequence[str],
    threshold: float = MERGE_SIMILARITY_THRESHOLD,
) -> PointSet:
    """Collapse near-duplicate points into their most concise representative.

    Empty and single-element inputs are returned unchanged. Output elements
    are always original points, and the output is never longer than the input.

    Args:
        points: Points, possibly gathered across many analysis runs.
        threshold: Similarity above which two points are considered the same.

    Returns:
        Reduced point set.

    Examples:
        >>> merge_similar_points([
        ...     "Budget overruns are likely",
        ...     "Budget overruns likely occur",
        ...     "Accessibility was ignored",
        ... ])
        ('Budget overruns are likely', 'Accessibility was ignored')
    """
    items = tuple(points)
    if len(items) < 2:
        return items

    merged = tuple(
        items[min(group, key=lambda i: (len(items[i]), i))]
        for group in group_similar_points(items, threshold)
    )
    logger.debug(f"Merged {len(items)} points into {len(merged)}")
    return merged
