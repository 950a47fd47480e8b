"""Tests for near-duplicate point merging."""

from __future__ import annotations

import pytest

from critique_engine.synthesis import group_similar_points, merge_similar_points


def test_merge_near_duplicates_keeps_shortest() -> None:
    points = [
        "Budget overruns are likely",
        "Budget overruns likely occur",
        "Accessibility was ignored",
    ]

    merged = merge_similar_points(points, threshold=0.7)

    assert merged == ("Budget overruns are likely", "Accessibility was ignored")


def test_merge_is_case_insensitive_for_exact_duplicates() -> None:
    merged = merge_similar_points(["Scope creep", "scope creep", "SCOPE CREEP"])
    assert merged == ("Scope creep",)


def test_merge_ties_keep_earliest() -> None:
    merged = merge_similar_points(["budget is too tight", "Budget is too Tight"])
    assert merged == ("budget is too tight",)


def test_merge_empty_and_single_unchanged() -> None:
    assert merge_similar_points([]) == ()
    assert merge_similar_points(["Only point"]) == ("Only point",)


def test_merge_never_grows_and_returns_original_points() -> None:
    points = [
        "Testing plan is absent",
        "The testing plan is absent",
        "Security review missing",
        "No owner for operations",
        "Operations have no owner",
    ]

    merged = merge_similar_points(points)

    assert len(merged) <= len(points)
    assert set(merged) <= set(points)


def test_merge_is_transitive() -> None:
    # A~B and B~C, but A and C share only two of four words
    points = [
        "alpha beta gamma delta",
        "alpha beta gamma epsilon",
        "alpha beta epsilon zeta",
    ]

    assert group_similar_points(points, threshold=0.7) == [[0, 1, 2]]
    assert merge_similar_points(points, threshold=0.7) == ("alpha beta gamma delta",)


def test_group_order_follows_first_appearance() -> None:
    points = ["Costs unclear", "Timeline tight", "costs unclear", "timeline tight"]
    assert group_similar_points(points) == [[0, 2], [1, 3]]


def test_threshold_one_only_merges_exact_matches() -> None:
    points = [
        "Budget overruns are likely",
        "Budget overruns likely occur",
        "budget overruns are likely",
    ]
    assert merge_similar_points(points, threshold=1.0) == (
        "Budget overruns are likely",
        "Budget overruns likely occur",
    )


@pytest.mark.parametrize("threshold", [-0.1, 1.5])
def test_invalid_threshold_raises(threshold: float) -> None:
    with pytest.raises(ValueError, match="threshold"):
        merge_similar_points(["a b", "a c"], threshold=threshold)
