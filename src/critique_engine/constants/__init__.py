"""Constants for the critique engine."""

from critique_engine.constants.columns import (
    ANALYSIS_LOG_COLUMNS,
    POINT,
    POINT_INDEX,
    RUN_ID,
    SIMPLIFICATION,
    TIMESTAMP,
    TONE,
)
from critique_engine.constants.engine import (
    ANALYSIS_POINT_COUNT,
    BULLET_CHARACTERS,
    DEFAULT_GENERATION_TIMEOUT_S,
    MERGE_SIMILARITY_THRESHOLD,
    POINT_DELIMITER,
    POINT_JOINER,
    SIMPLIFIED_MAX_WORDS,
    SIMPLIFIED_POINT_COUNT,
    SYNTHESIS_CAP,
    TONE_POINT_COUNT,
    TOPIC_MIN_WORD_LENGTH,
    TOPIC_WORD_COUNT,
)
from critique_engine.constants.llm_config import (
    DEFAULT_MODEL_ANTHROPIC,
    DEFAULT_MODEL_GEMINI,
    DEFAULT_MODEL_OPENAI,
    DEFAULT_MODELS,
    DEFAULT_PROVIDER,
    DEFAULT_TEMPERATURE,
)
from critique_engine.constants.paths import ANALYSIS_LOG_PATH, DATA_DIR

__all__ = [
    "ANALYSIS_LOG_COLUMNS",
    "POINT",
    "POINT_INDEX",
    "RUN_ID",
    "SIMPLIFICATION",
    "TIMESTAMP",
    "TONE",
    "ANALYSIS_LOG_PATH",
    "ANALYSIS_POINT_COUNT",
    "BULLET_CHARACTERS",
    "DATA_DIR",
    "DEFAULT_GENERATION_TIMEOUT_S",
    "DEFAULT_MODEL_ANTHROPIC",
    "DEFAULT_MODEL_GEMINI",
    "DEFAULT_MODEL_OPENAI",
    "DEFAULT_MODELS",
    "DEFAULT_PROVIDER",
    "DEFAULT_TEMPERATURE",
    "MERGE_SIMILARITY_THRESHOLD",
    "POINT_DELIMITER",
    "POINT_JOINER",
    "SIMPLIFIED_MAX_WORDS",
    "SIMPLIFIED_POINT_COUNT",
    "SYNTHESIS_CAP",
    "TONE_POINT_COUNT",
    "TOPIC_MIN_WORD_LENGTH",
    "TOPIC_WORD_COUNT",
]
