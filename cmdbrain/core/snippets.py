"""Snippet recommendation by tag overlap.

Assumptions
-----------
Snippet tags and languages are stored normalized (see :func:`make_snippet`),
so a plain membership test against expanded keywords is enough.

Risks
-----
Multi-word synonyms such as ``web site`` never match a single tag.

Alternatives
------------
Cosine similarity between keyword and tag vectors.

Rationale
---------
Integer overlap plus a small language nudge is easy to explain next to each
recommendation.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Union

from ..schemas import Snippet
from .text import normalize, uniq

LANGUAGE_BONUS = 0.5


def score_snippet(snippet, keywords: Iterable[str]) -> float:
    """Tags of ``snippet`` found in ``keywords``, plus a bonus for its language."""

    kw = keywords if isinstance(keywords, (set, frozenset)) else set(keywords)
    score = float(sum(1 for t in snippet.tags if t in kw))
    if snippet.language in kw:
        score += LANGUAGE_BONUS
    return score


def rank_snippets(snippets: Sequence, keywords: Iterable[str], top_k: int = 5) -> List:
    """Return the ``top_k`` best scoring snippets.

    Ties keep library order.
    """

    kw = set(keywords)
    ranked = sorted(snippets, key=lambda s: score_snippet(s, kw), reverse=True)
    return ranked[:top_k]


def normalize_tags(tags: Union[str, Iterable[str], None]) -> List[str]:
    """Normalize a tag list or a comma separated string, dropping empties."""

    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    return uniq(t for t in (normalize(x) for x in tags) if t)


def make_snippet(
    title: str,
    language: Optional[str],
    tags: Union[str, Iterable[str], None],
    body: str,
) -> Optional[Snippet]:
    """Build a snippet record from manually entered fields.

    Returns ``None`` when ``title`` is blank.  ``language`` falls back to
    ``text``.
    """

    title = (title or "").strip()
    if not title:
        return None
    return Snippet(
        title=title,
        language=normalize(language) or "text",
        tags=normalize_tags(tags),
        snippet=body or "",
    )
