"""Engine settings: module constants overridable from ``CRITIQUE_*`` env vars."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from critique_engine.constants import (
    ANALYSIS_LOG_PATH,
    DEFAULT_GENERATION_TIMEOUT_S,
    DEFAULT_PROVIDER,
    MERGE_SIMILARITY_THRESHOLD,
    SYNTHESIS_CAP,
    TOPIC_WORD_COUNT,
)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class EngineSettings:
    """Runtime configuration of a critique session.

    Attributes:
        merge_threshold: Similarity above which two points merge, in [0, 1].
        synthesis_cap: Maximum size of the synthesized point set.
        topic_word_count: Significant words forming a topic key.
        generation_timeout_s: Per-call generation timeout; None waits forever.
        include_existing_points: Send the synthesized history with the analysis
            prompt so the backend avoids repeating it.
        provider: LLM provider name.
        model: Model name; None uses the provider default.
        log_path: CSV analysis log.
    """

    merge_threshold: float = MERGE_SIMILARITY_THRESHOLD
    synthesis_cap: int = SYNTHESIS_CAP
    topic_word_count: int = TOPIC_WORD_COUNT
    generation_timeout_s: float | None = DEFAULT_GENERATION_TIMEOUT_S
    include_existing_points: bool = False
    provider: str = DEFAULT_PROVIDER
    model: str | None = None
    log_path: Path = ANALYSIS_LOG_PATH

    def __post_init__(self) -> None:
        if not 0.0 <= self.merge_threshold <= 1.0:
            raise ValueError(f"merge_threshold must be in [0, 1], got {self.merge_threshold}")
        if self.synthesis_cap < 0:
            raise ValueError(f"synthesis_cap must be >= 0, got {self.synthesis_cap}")
        if self.topic_word_count < 1:
            raise ValueError(f"topic_word_count must be >= 1, got {self.topic_word_count}")
        if self.generation_timeout_s is not None and self.generation_timeout_s <= 0:
            raise ValueError(
                f"generation_timeout_s must be positive, got {self.generation_timeout_s}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineSettings:
        """Build settings from ``CRITIQUE_*`` variables; unset ones keep defaults.

        Raises:
            ValueError: If a variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        kwargs: dict = {}

        try:
            if "CRITIQUE_MERGE_THRESHOLD" in env:
                kwargs["merge_threshold"] = float(env["CRITIQUE_MERGE_THRESHOLD"])
            if "CRITIQUE_SYNTHESIS_CAP" in env:
                kwargs["synthesis_cap"] = int(env["CRITIQUE_SYNTHESIS_CAP"])
            if "CRITIQUE_TOPIC_WORDS" in env:
                kwargs["topic_word_count"] = int(env["CRITIQUE_TOPIC_WORDS"])
            timeout = env.get("CRITIQUE_GENERATION_TIMEOUT_S", "").strip()
            if timeout:
                kwargs["generation_timeout_s"] = float(timeout)
        except ValueError as e:
            raise ValueError(f"Invalid CRITIQUE_* setting: {e}") from e

        if "CRITIQUE_INCLUDE_EXISTING_POINTS" in env:
            kwargs["include_existing_points"] = _parse_bool(
                "CRITIQUE_INCLUDE_EXISTING_POINTS", env["CRITIQUE_INCLUDE_EXISTING_POINTS"]
            )
        if env.get("CRITIQUE_PROVIDER"):
            kwargs["provider"] = env["CRITIQUE_PROVIDER"].strip().lower()
        if env.get("CRITIQUE_MODEL"):
            kwargs["model"] = env["CRITIQUE_MODEL"].strip()
        if env.get("CRITIQUE_LOG_PATH"):
            kwargs["log_path"] = Path(env["CRITIQUE_LOG_PATH"])

        return cls(**kwargs)
