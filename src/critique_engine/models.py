"""Data models for critique points, variants, themes and session snapshots.

This module defines:
- SimplificationLevel / Tone: the two presentation dimensions of a variant
- VariantKey / Variant: identity and immutable snapshot of one cached rendering
- Theme / ThemeGroup / ThemedGrouping: points grouped under externally sourced themes
- SessionState / SessionSnapshot: what a UI consumer pulls from a coordinator

A point is a plain ``str``; a point set is an immutable ``tuple[str, ...]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

PointSet = tuple[str, ...]


class SimplificationLevel(str, Enum):
    FULL = "full"
    SIMPLIFIED = "simplified"


class Tone(str, Enum):
    NORMAL = "normal"
    PERSUASIVE = "persuasive"
    AGGRESSIVE = "aggressive"
    CRITICAL = "critical"


class VariantStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


class SessionState(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    REGENERATING = "regenerating"
    READY = "ready"
    ERROR = "error"


class ThemeColor(str, Enum):
    """Theme palette. Colors are handed out round-robin in this order."""

    LIGHT_GREEN = "light_green"
    LIGHT_BLUE = "light_blue"
    LIGHT_YELLOW = "light_yellow"
    LIGHT_PINK = "light_pink"
    VIOLET = "violet"
    LIGHT_GRAY = "light_gray"

    @property
    def hex(self) -> str:
        return _COLOR_HEX[self]

    @classmethod
    def for_index(cls, index: int) -> ThemeColor:
        palette = list(cls)
        return palette[index % len(palette)]


_COLOR_HEX: dict[ThemeColor, str] = {
    ThemeColor.LIGHT_GREEN: "#C3E5B5",
    ThemeColor.LIGHT_BLUE: "#BFE3F2",
    ThemeColor.LIGHT_YELLOW: "#F5F7B5",
    ThemeColor.LIGHT_PINK: "#F5C3C2",
    ThemeColor.VIOLET: "#D5C8E8",
    ThemeColor.LIGHT_GRAY: "#E5E5E5",
}


@dataclass(frozen=True)
class VariantKey:
    """Identity of a variant: simplification level x tone x grouping epoch.

    Attributes:
        level: Full or simplified wording.
        tone: One of the four tones.
        epoch: Grouping epoch the variant belongs to. Advancing the epoch
            invalidates every variant keyed to an older one.
    """

    level: SimplificationLevel
    tone: Tone
    epoch: int

    def with_tone(self, tone: Tone) -> VariantKey:
        return replace(self, tone=tone)

    def with_level(self, level: SimplificationLevel) -> VariantKey:
        return replace(self, level=level)

    def to_dict(self) -> dict[str, Any]:
        return {"level": self.level.value, "tone": self.tone.value, "epoch": self.epoch}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> VariantKey:
        return cls(
            level=SimplificationLevel(d["level"]),
            tone=Tone(d["tone"]),
            epoch=int(d["epoch"]),
        )


@dataclass(frozen=True)
class Variant:
    """Immutable snapshot of one cache entry.

    Attributes:
        key: Variant identity.
        text: Raw generated text ("" while pending or after failure).
        points: Points split from ``text``.
        status: pending, ready or failed.
        error: Failure message when ``status`` is failed.
    """

    key: VariantKey
    text: str = ""
    points: PointSet = ()
    status: VariantStatus = VariantStatus.PENDING
    error: str | None = None

    @property
    def is_ready(self) -> bool:
        return self.status is VariantStatus.READY

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "key": self.key.to_dict(),
            "text": self.text,
            "points": list(self.points),
            "status": self.status.value,
        }
        if self.error is not None:
            d["error"] = self.error
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Variant:
        return cls(
            key=VariantKey.from_dict(d["key"]),
            text=d.get("text", ""),
            points=tuple(d.get("points", [])),
            status=VariantStatus(d["status"]),
            error=d.get("error"),
        )


@dataclass(frozen=True)
class Theme:
    """Externally sourced category used to group points.

    Attributes:
        name: Display name (matched case-insensitively on reconciliation).
        color: Palette color.
        selected: Local UI state; deselected themes are de-emphasized, not removed.
        theme_id: Stable identifier from the theme source, when it has one.
    """

    name: str
    color: ThemeColor = ThemeColor.LIGHT_GREEN
    selected: bool = True
    theme_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "name": self.name,
            "color": self.color.value,
            "selected": self.selected,
        }
        if self.theme_id is not None:
            d["theme_id"] = self.theme_id
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any], index: int = 0) -> Theme:
        """Deserialize from dictionary. Missing colors come from the palette by ``index``."""
        color = d.get("color")
        return cls(
            name=str(d.get("name") or f"Theme {index + 1}"),
            color=ThemeColor(color) if color else ThemeColor.for_index(index),
            selected=bool(d.get("selected", True)),
            theme_id=d.get("theme_id") or d.get("id"),
        )


@dataclass(frozen=True)
class ThemeGroup:
    theme: Theme
    points: PointSet = ()

    def to_dict(self) -> dict[str, Any]:
        return {"theme": self.theme.to_dict(), "points": list(self.points)}


@dataclass(frozen=True)
class ThemedGrouping:
    """Points of one point set partitioned under themes, in theme order."""

    groups: tuple[ThemeGroup, ...] = ()

    @property
    def themes(self) -> tuple[Theme, ...]:
        return tuple(group.theme for group in self.groups)

    @property
    def all_points(self) -> PointSet:
        return tuple(point for group in self.groups for point in group.points)

    @property
    def selected_points(self) -> PointSet:
        return tuple(
            point for group in self.groups if group.theme.selected for point in group.points
        )

    @property
    def total_points(self) -> int:
        """Point count including deselected themes."""
        return sum(len(group.points) for group in self.groups)

    def group_for(self, name: str) -> ThemeGroup | None:
        wanted = name.strip().lower()
        for group in self.groups:
            if group.theme.name.strip().lower() == wanted:
                return group
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"groups": [group.to_dict() for group in self.groups]}


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything a UI consumer needs after a state change.

    Attributes:
        state: Coordinator state.
        active_points: Points of the variant currently on display.
        active_variant_status: Status of the variant on display (None before any).
        tone: Requested tone.
        simplification: Requested simplification level.
        themed_grouping: Grouping of ``active_points`` when themed display is on
            and themes are loaded; None otherwise.
        changing_tone: A tone/simplification variant is being generated; the
            previous points stay on display.
        error: User-visible failure message.
        epoch: Grouping epoch of the session.
        themes: Loaded themes with their selection state.
    """

    state: SessionState
    active_points: PointSet = ()
    active_variant_status: VariantStatus | None = None
    tone: Tone = Tone.NORMAL
    simplification: SimplificationLevel = SimplificationLevel.FULL
    themed_grouping: ThemedGrouping | None = None
    changing_tone: bool = False
    error: str | None = None
    epoch: int = 0
    themes: tuple[Theme, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "active_points": list(self.active_points),
            "active_variant_status": (
                self.active_variant_status.value if self.active_variant_status else None
            ),
            "tone": self.tone.value,
            "simplification": self.simplification.value,
            "themed_grouping": self.themed_grouping.to_dict() if self.themed_grouping else None,
            "changing_tone": self.changing_tone,
            "error": self.error,
            "epoch": self.epoch,
            "themes": [theme.to_dict() for theme in self.themes],
        }
