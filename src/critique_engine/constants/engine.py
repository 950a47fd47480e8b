"""Point splitting, merging and synthesis constants."""

# =============================================================================
# Point splitting
# =============================================================================

# The generation backend is instructed to separate points with this token
POINT_DELIMITER = "**"
# Canonical separator used when points are joined back into one text
POINT_JOINER = " ** "

# Bullet glyphs normalized to the delimiter ("â€¢" is a mis-decoded "•")
BULLET_CHARACTERS = ("â€¢", "•", "◦", "▪", "‣", "●")

# =============================================================================
# Similarity merging
# =============================================================================

MERGE_SIMILARITY_THRESHOLD = 0.7  # Dice coefficient over token sets

# =============================================================================
# Aggressive reduction (cross-run synthesis only)
# =============================================================================

SYNTHESIS_CAP = 10  # Max points in the synthesized point set
TOPIC_WORD_COUNT = 3  # Significant words that make up a topic key
TOPIC_MIN_WORD_LENGTH = 4  # "Significant" = longer than 3 characters

# =============================================================================
# Generation
# =============================================================================

ANALYSIS_POINT_COUNT = 10
SIMPLIFIED_POINT_COUNT = 3
TONE_POINT_COUNT = 3
SIMPLIFIED_MAX_WORDS = 20

DEFAULT_GENERATION_TIMEOUT_S: float | None = None  # No timeout by default
