"""Point synthesis: splitting, similarity merging, reduction and history synthesis."""

from critique_engine.synthesis.history import (
    load_synthesized_points,
    synthesize_points,
    union_point_sets,
)
from critique_engine.synthesis.merger import group_similar_points, merge_similar_points
from critique_engine.synthesis.reducer import reduce_points, topic_key
from critique_engine.synthesis.splitter import clean_point, join_points, split_points

__all__ = [
    "clean_point",
    "group_similar_points",
    "join_points",
    "load_synthesized_points",
    "merge_similar_points",
    "reduce_points",
    "split_points",
    "synthesize_points",
    "topic_key",
    "union_point_sets",
]
