"""Tests for prompt builders."""

from critique_engine.models import Tone
from critique_engine.prompts import (
    DEFAULT_TONE_INSTRUCTION,
    NO_CHALLENGE_TEXT,
    TONE_INSTRUCTIONS,
    build_analysis_prompt,
    build_simplify_prompt,
    build_tone_prompt,
)


class TestAnalysisPrompt:
    def test_user_prompt_is_decisions(self):
        user, _ = build_analysis_prompt(["  Use stairs ", "", "One entrance"])
        assert user == "Use stairs\nOne entrance"

    def test_system_prompt_mentions_challenge_and_count(self):
        _, system = build_analysis_prompt(["x"], design_challenge="Museum entrance", point_count=10)

        assert system.startswith(
            'You are analyzing design decisions for the design challenge: "Museum entrance".'
        )
        assert "exactly 10 critical points" in system
        assert "Tenth point here" in system
        assert "** **" in system

    def test_missing_challenge(self):
        _, system = build_analysis_prompt(["x"], design_challenge="   ")
        assert f'"{NO_CHALLENGE_TEXT}"' in system

    def test_consensus_and_existing_points_are_numbered(self):
        _, system = build_analysis_prompt(
            ["x"],
            consensus_points=["Keep the lobby", "Budget is fixed"],
            existing_points=["Stairs exclude users"],
        )

        assert "should NOT be questioned" in system
        assert "1. Keep the lobby\n2. Budget is fixed" in system
        assert "Do not repeat them" in system
        assert "1. Stairs exclude users" in system

    def test_without_consensus_no_section(self):
        _, system = build_analysis_prompt(["x"])
        assert "should NOT be questioned" not in system
        assert "Do not repeat them" not in system

    def test_uncommon_point_count_example(self):
        _, system = build_analysis_prompt(["x"], point_count=4)
        assert "Point 1 here ** ** Point 2 here ** ** Point 3 here ** ** Point 4 here" in system


class TestRewritePrompts:
    def test_simplify_prompt(self):
        user, system = build_simplify_prompt("A ** ** B", point_count=3, max_words=20)

        assert user == "A ** ** B"
        assert system.startswith("Please simplify")
        assert "EXACTLY 3 points" in system
        assert "no more than 20 words" in system

    def test_tone_prompt_uses_persona(self):
        for tone in (Tone.PERSUASIVE, Tone.AGGRESSIVE, Tone.CRITICAL):
            user, system = build_tone_prompt("A ** ** B", tone)
            assert user == "A ** ** B"
            assert system.startswith(TONE_INSTRUCTIONS[tone])

    def test_normal_tone_falls_back(self):
        _, system = build_tone_prompt("A", Tone.NORMAL)
        assert system.startswith(DEFAULT_TONE_INSTRUCTION)

    def test_tone_accepts_string_value(self):
        _, system = build_tone_prompt("A", "aggressive")
        assert system.startswith(TONE_INSTRUCTIONS[Tone.AGGRESSIVE])
