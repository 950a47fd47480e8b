"""DataFrame column name constants."""

# Analysis log columns (one row per critique point)

RUN_ID = "run_id"
TIMESTAMP = "timestamp"
TONE = "tone"
SIMPLIFICATION = "simplification"
POINT_INDEX = "point_index"
POINT = "point"

ANALYSIS_LOG_COLUMNS = [RUN_ID, TIMESTAMP, TONE, SIMPLIFICATION, POINT_INDEX, POINT]
