"""
Assumptions: bag-of-words frequency vectors are enough to compare commands
Risks: word order and negation are invisible to the score
Alternatives: TF-IDF weighting or sentence embeddings
Rationale: deterministic cosine score that can be explained line by line
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from .lexicon import antonyms_of
from .text import tokenize

SPECTRUM_MAX = 1000


def vectorize(tokens: Sequence[str]) -> Dict[str, int]:
    """Bag-of-words frequency map of ``tokens``."""

    return dict(Counter(tokens))


def cosine_sim(a_tokens: Sequence[str], b_tokens: Sequence[str]) -> float:
    """Cosine similarity of two token sequences in ``[0, 1]``.

    Returns ``0.0`` when either side is empty rather than dividing by zero.
    """

    a = vectorize(a_tokens)
    b = vectorize(b_tokens)
    a2 = sum(v * v for v in a.values())
    b2 = sum(v * v for v in b.values())
    if a2 == 0 or b2 == 0:
        return 0.0
    dot = sum(av * b.get(t, 0) for t, av in a.items())
    # sqrt of the integer product keeps cosine(x, x) exactly 1.0
    return min(1.0, max(0.0, dot / math.sqrt(a2 * b2)))


def spectrum(value: float) -> int:
    """Map ``value`` from ``[0, 1]`` onto the integer scale ``0..1000``.

    Out of range input is clamped; halves round up.
    """

    v = max(0.0, min(1.0, float(value)))
    return int(math.floor(v * SPECTRUM_MAX + 0.5))


@dataclass
class Scored:
    item: Any
    score: float


@dataclass
class HistoryRanking:
    best: float = 0.0
    similarity: int = 0
    difference: int = SPECTRUM_MAX
    similar: List[Scored] = field(default_factory=list)
    different: List[Scored] = field(default_factory=list)
    opposite: List[Scored] = field(default_factory=list)


def rank_history(tokens: Sequence[str], commands: Sequence, dictionary, top_k: int = 5) -> HistoryRanking:
    """Rank prior ``commands`` against ``tokens``.

    ``similar`` holds the ``top_k`` closest entries, ``different`` the
    ``top_k`` farthest (most different first), and ``opposite`` the entries
    closest to the antonyms of ``tokens``.  The difference score is the
    complement of the single best match, not an aggregate distance.
    """

    if not commands:
        return HistoryRanking()

    stop = getattr(dictionary, "stopwords", None) or set()
    entries = [(c, tokenize(c.raw, stop)) for c in commands]

    # sorted() is stable, so ties keep log order
    scored = sorted(
        (Scored(c, cosine_sim(tokens, toks)) for c, toks in entries),
        key=lambda s: s.score,
        reverse=True,
    )
    anti = antonyms_of(tokens, dictionary)
    opposite = sorted(
        (Scored(c, cosine_sim(anti, toks)) for c, toks in entries),
        key=lambda s: s.score,
        reverse=True,
    )

    best = scored[0].score
    return HistoryRanking(
        best=best,
        similarity=spectrum(best),
        difference=spectrum(1 - best),
        similar=scored[:top_k],
        different=scored[max(0, len(scored) - top_k):][::-1],
        opposite=opposite[:top_k],
    )


# Checklist:
# - [x] Think Harder
# - [x] Think Deeper
# - [x] More Information
# - [x] Check Again
