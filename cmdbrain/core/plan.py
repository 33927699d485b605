"""Pseudocode plan synthesis.

Only the most recently appended command feeds the variable parts of the plan;
earlier history is ignored.  The algorithm steps and output fields are
constant.
"""

from __future__ import annotations

from typing import List, Sequence

from .lexicon import expand_synonyms
from .text import tokenize

EMPTY_PLAN = "# No commands yet. Add one above."

ALGORITHM_STEPS = (
    "Parse incoming command and detect intent, entities, constraints.",
    "Refine keywords using dictionary (synonyms/antonyms, stopword removal).",
    "Compute similarity against library and prior commands.",
    "Assemble verbose interpretation using templates.",
    "Run one-time enhancement passes (text normalization).",
    "Select best-matching code snippet(s) by tag overlap.",
    "Emit final response + suggested multi-language snippets.",
)

OUTPUT_FIELDS = (
    "verbose_interpretation",
    "similarity_spectrum (0..1000)",
    "recommended_snippets",
)


def synthesize_plan(commands: Sequence, dictionary) -> str:
    """Return the plan text for the last command in ``commands``."""

    if not commands:
        return EMPTY_PLAN
    last = commands[-1]
    tokens = tokenize(last.raw, getattr(dictionary, "stopwords", None) or ())
    expanded = expand_synonyms(tokens, dictionary)
    flat = last.raw.replace("\n", " ")

    lines: List[str] = [
        "# PSEUDOCODE PLAN (auto-generated)",
        f"# Last command at {last.created_at}",
        "",
        "Input:",
        f'  command = """{flat}"""',
        "",
        "Derived Keywords:",
        "  - " + "\n  - ".join(expanded),
        "",
        "Algorithm Steps:",
        *[f"  {i}. {step}" for i, step in enumerate(ALGORITHM_STEPS, start=1)],
        "",
        "Output:",
        *[f"  - {name}" for name in OUTPUT_FIELDS],
    ]
    return "\n".join(lines)


# Checklist:
# - [x] Think Harder
# - [x] Think Deeper
# - [x] More Information
# - [x] Check Again
