"""Group critique points under design themes.

Themes come from an external source (the board or a theme generator). This
module only decides which point goes under which theme, carries the local
``selected`` flag across theme refreshes, and re-binds groups when the source
renames or recolors a theme.

Name matching is a heuristic: a group is re-bound to the first theme whose
name equals, contains, or is contained in the group's name (case-insensitive).
Overlapping names can bind several groups to one theme; that is accepted as is.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace

from critique_engine.models import PointSet, Theme, ThemedGrouping, ThemeGroup
from critique_engine.text_norm import normalize_for_matching, tokenize

logger = logging.getLogger(__name__)

_MIN_STEM_WORD_LENGTH = 4
_STEM_LENGTH = 5


def _name_key(name: str) -> str:
    return normalize_for_matching(name).lower()


def names_match(current: str, candidate: str) -> bool:
    """Case-insensitive equality or containment in either direction."""
    a, b = _name_key(current), _name_key(candidate)
    if not a or not b:
        return False
    return a == b or a in b or b in a


def find_matching_theme(theme: Theme, candidates: Sequence[Theme]) -> Theme | None:
    """Find the refreshed counterpart of ``theme``.

    A stable ``theme_id`` wins when both sides have one; otherwise the first
    candidate whose name matches (see ``names_match``) is returned.
    """
    if theme.theme_id is not None:
        for candidate in candidates:
            if candidate.theme_id == theme.theme_id:
                return candidate
    for candidate in candidates:
        if names_match(theme.name, candidate.name):
            return candidate
    return None


def _stems(text: str) -> set[str]:
    return {
        token.rstrip("s")[:_STEM_LENGTH]
        for token in tokenize(text)
        if len(token) >= _MIN_STEM_WORD_LENGTH
    }


def _best_lexical_theme(point: str, theme_stems: list[set[str]]) -> int | None:
    point_stems = _stems(point)
    best_index, best_score = None, 0
    for index, stems in enumerate(theme_stems):
        score = len(point_stems & stems)
        if score > best_score:
            best_index, best_score = index, score
    return best_index


def assign_points(
    points: Sequence[str],
    themes: Sequence[Theme],
    labels: Mapping[str, str] | None = None,
) -> ThemedGrouping:
    """Partition points under themes.

    Every point lands in exactly one group:

    1. an explicit label from the theme source (``labels[point]`` names a theme,
       matched with ``names_match``);
    2. otherwise the theme sharing the most word stems with the point
       (earliest theme on ties);
    3. otherwise the group with the fewest points so far (earliest on ties).

    With no themes at all there is nothing to group under and the result is empty.

    Args:
        points: Point set to group.
        themes: Themes in display order; their ``selected`` flags are kept.
        labels: Optional point -> theme name mapping.

    Returns:
        ThemedGrouping with one group per theme, in theme order.
    """
    if not themes:
        return ThemedGrouping()

    labels = labels or {}
    theme_stems = [_stems(theme.name) for theme in themes]
    buckets: list[list[str]] = [[] for _ in themes]

    for point in points:
        index = None
        label = labels.get(point)
        if label:
            index = next(
                (i for i, theme in enumerate(themes) if names_match(label, theme.name)), None
            )
        if index is None:
            index = _best_lexical_theme(point, theme_stems)
        if index is None:
            index = min(range(len(buckets)), key=lambda i: (len(buckets[i]), i))
        buckets[index].append(point)

    return ThemedGrouping(
        groups=tuple(
            ThemeGroup(theme=theme, points=tuple(bucket)) for theme, bucket in zip(themes, buckets)
        )
    )


def reconcile_grouping(grouping: ThemedGrouping, refreshed: Sequence[Theme]) -> ThemedGrouping:
    """Re-bind an existing grouping to a refreshed theme list.

    Matched groups take the refreshed theme's identity (name, color, id) but
    keep their local ``selected`` flag. Unmatched groups keep their previous
    identity. Refreshed themes no group matched are appended as empty groups.
    """
    groups: list[ThemeGroup] = []
    matched: set[int] = set()

    for group in grouping.groups:
        match = find_matching_theme(group.theme, refreshed)
        if match is None:
            logger.warning(f"No refreshed theme matches '{group.theme.name}'; keeping it")
            groups.append(group)
            continue
        matched.add(id(match))
        groups.append(replace(group, theme=replace(match, selected=group.theme.selected)))

    for theme in refreshed:
        if id(theme) not in matched:
            groups.append(ThemeGroup(theme=theme))

    return ThemedGrouping(groups=tuple(groups))


def select_theme(themes: Sequence[Theme], name: str, selected: bool) -> tuple[Theme, ...]:
    """Set the selection flag of every theme named ``name`` (case-insensitive)."""
    key = _name_key(name)
    return tuple(
        replace(theme, selected=selected) if _name_key(theme.name) == key else theme
        for theme in themes
    )


def carry_selection(previous: Sequence[Theme], refreshed: Sequence[Theme]) -> tuple[Theme, ...]:
    """Overlay the local selection of ``previous`` themes onto a refreshed list."""
    carried = []
    for theme in refreshed:
        match = find_matching_theme(theme, previous)
        carried.append(replace(theme, selected=match.selected) if match else theme)
    return tuple(carried)


def set_theme_selected(grouping: ThemedGrouping, name: str, selected: bool) -> ThemedGrouping:
    """Set the selection flag of every group named ``name`` (case-insensitive).

    Deselected groups keep their points; consumers only de-emphasize them.
    """
    key = _name_key(name)
    return ThemedGrouping(
        groups=tuple(
            replace(group, theme=replace(group.theme, selected=selected))
            if _name_key(group.theme.name) == key
            else group
            for group in grouping.groups
        )
    )


def grouped_points(grouping: ThemedGrouping) -> dict[str, PointSet]:
    """Theme name -> points, in theme order."""
    return {group.theme.name: group.points for group in grouping.groups}
