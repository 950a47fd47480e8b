"""Prompts for critique generation.

Every prompt asks the backend to separate points with ``** **`` so that the
result can be segmented by ``split_points``. Each builder returns a
``(user_prompt, system_prompt)`` pair, the argument order of
``GenerationBackend.generate``.
"""

from __future__ import annotations

from collections.abc import Sequence

from critique_engine.constants import (
    ANALYSIS_POINT_COUNT,
    SIMPLIFIED_MAX_WORDS,
    SIMPLIFIED_POINT_COUNT,
    TONE_POINT_COUNT,
)
from critique_engine.models import Tone

NO_CHALLENGE_TEXT = "No challenge specified"

_FORMAT_EXAMPLE = {
    3: "First point here ** ** Second point here ** ** Third point here",
    10: (
        "First point here ** ** Second point here ** ** Third point here ** ** "
        "Fourth point here ** ** Fifth point here ** ** Sixth point here ** ** "
        "Seventh point here ** ** Eighth point here ** ** Ninth point here ** ** "
        "Tenth point here"
    ),
}

TONE_INSTRUCTIONS: dict[Tone, str] = {
    Tone.PERSUASIVE: (
        "Act as a charismatic consultant who genuinely wants to help. Use phrases like "
        '"Consider this perspective...", "What if we looked at it this way...", '
        '"I understand the intention, however...". '
        "Be diplomatic but firm in your critiques."
    ),
    Tone.AGGRESSIVE: (
        "Act as a brutally honest critic who doesn't hold back. Use strong phrases like "
        '"This approach is fundamentally flawed!", "This completely misses the mark...". '
        "Be confrontational and direct, expressing strong disagreement."
    ),
    Tone.CRITICAL: (
        "Act as a meticulous academic reviewer. Use analytical phrases like "
        '"The evidence does not support...", "This lacks rigorous consideration of...", '
        '"A critical examination reveals...". Be thorough and uncompromising in your analysis.'
    ),
}

DEFAULT_TONE_INSTRUCTION = "Be direct but professional."


def _format_example(count: int) -> str:
    if count in _FORMAT_EXAMPLE:
        return _FORMAT_EXAMPLE[count]
    return " ** ** ".join(f"Point {i + 1} here" for i in range(count))


def _numbered(points: Sequence[str]) -> str:
    return "\n".join(f"{i + 1}. {point}" for i, point in enumerate(points))


def build_analysis_prompt(
    decisions: Sequence[str],
    design_challenge: str = "",
    consensus_points: Sequence[str] = (),
    existing_points: Sequence[str] = (),
    point_count: int = ANALYSIS_POINT_COUNT,
) -> tuple[str, str]:
    """Build the antagonistic analysis prompt.

    Args:
        decisions: Design decisions (sticky note texts) to critique.
        design_challenge: The challenge the board is working on.
        consensus_points: Agreements that must not be criticized.
        existing_points: Earlier synthesized critiques the answer should not repeat.
        point_count: Number of points to ask for.

    Returns:
        (user_prompt, system_prompt)
    """
    challenge = design_challenge.strip() or NO_CHALLENGE_TEXT

    system_prompt = f"""You are analyzing design decisions for the design challenge: "{challenge}". Provide exactly {point_count} critical points that identify potential problems or conflicts in these decisions.

Rules:
1. NEVER question or criticize the consensus points - these are established agreements that must be respected
2. Focus on potential problems, conflicts, or negative consequences
3. Always provide EXACTLY {point_count} points, no more, no less
4. Each point should be a complete, self-contained criticism
5. Keep each point focused on a single issue

Format your response as exactly {point_count} points separated by ** **. Example:
{_format_example(point_count)}"""

    if consensus_points:
        system_prompt += (
            "\n\nConsensus points that should NOT be questioned or criticized:\n"
            + _numbered(consensus_points)
        )
    if existing_points:
        system_prompt += (
            "\n\nThese points were already raised in earlier analyses. "
            "Do not repeat them; find different problems:\n" + _numbered(existing_points)
        )

    user_prompt = "\n".join(decision.strip() for decision in decisions if decision.strip())
    return user_prompt, system_prompt


def build_simplify_prompt(
    text: str,
    point_count: int = SIMPLIFIED_POINT_COUNT,
    max_words: int = SIMPLIFIED_MAX_WORDS,
) -> tuple[str, str]:
    """Build the prompt that condenses an analysis into a few short points."""
    system_prompt = f"""Please simplify the following criticism points into {point_count} very concise, clear points.

Rules:
1. You MUST provide EXACTLY {point_count} points, no more, no less
2. Each point should be no more than {max_words} words
3. Keep the core message of each original point
4. Do not use any numbering, bullet points, or labels
5. Format with exactly two ** ** between points

Example format:
{_format_example(point_count)}

Do not include any other text or formatting."""
    return text, system_prompt


def build_tone_prompt(
    text: str,
    tone: Tone,
    point_count: int = TONE_POINT_COUNT,
) -> tuple[str, str]:
    """Build the prompt that rewrites points in another tone.

    ``Tone.NORMAL`` has no persona and falls back to a neutral instruction.
    """
    instruction = TONE_INSTRUCTIONS.get(Tone(tone), DEFAULT_TONE_INSTRUCTION)
    system_prompt = f"""{instruction}

Rules for the response:
1. You MUST provide EXACTLY {point_count} points, no more, no less
2. Each point should be a complete, self-contained criticism
3. Do not use any numbering, bullet points, or labels
4. Keep each point focused on a single issue
5. Maintain the core message of each original point while adjusting the tone
6. Format your response with exactly two ** ** between each point

Example format:
{_format_example(point_count)}

Rewrite the following criticism points using this format and tone. Do not add any additional text or formatting."""
    return text, system_prompt
