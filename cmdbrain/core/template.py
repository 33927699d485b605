"""Verbose interpretation template.

The document layout is fixed; only the fact values and the two scores vary.
Empty lists render as the literal ``(none)``.
"""

from __future__ import annotations

from typing import Sequence

NONE = "(none)"

INTENT = (
    "- The user likely wants the system to parse, refine, and reason about "
    "the command to produce an actionable summary."
)


def _joined(values: Sequence[str]) -> str:
    return ", ".join(values) or NONE


def build_verbose_template(
    raw: str,
    tokens: Sequence[str],
    expanded: Sequence[str],
    antonyms: Sequence[str],
    similar_score: int,
    different_score: int,
) -> str:
    """Render the interpretation document for one command."""

    facts = [
        ("Command", raw),
        ("Primary Keywords", _joined(tokens)),
        ("Expanded Keywords", _joined(expanded)),
        ("Opposite Terms", _joined(antonyms)),
    ]
    lines = [
        "# Interpretation",
        "## Facts",
        *[f"- **{k}:** {v}" for k, v in facts],
        "",
        "## Intent",
        INTENT,
        "",
        "## Logic",
        f"- Similarity → {similar_score}/1000 (higher = closer)",
        f"- Difference → {different_score}/1000 (higher = more different)",
        "- Use antonyms to probe opposites and ensure coverage of negative space.",
        "",
        "## Output Template",
        "- Summary: <one paragraph summary>",
        "- Steps: <bullet list of actions>",
        "- Snippets: <ranked list of language/library examples>",
    ]
    return "\n".join(lines)
