"""Text normalization and keyword tokenization.

Assumptions
-----------
Commands are mostly ASCII English.  Anything outside ``[a-z0-9_-]`` and
whitespace carries no keyword signal.

Risks
-----
Non-latin scripts are erased entirely and yield no tokens.

Alternatives
------------
A real tokenizer (spaCy, NLTK) with lemmatization.

Rationale
---------
A regex pass is deterministic and cheap, and every caller (history ranking,
plan synthesis, snippet tags) agrees on the same token shape.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

_STRIP_RE = re.compile(r"[^a-z0-9_\-\s]")
_SPACE_RE = re.compile(r"\s+")


def normalize(text: Optional[str]) -> str:
    """Lowercase ``text``, blank out punctuation and collapse whitespace."""

    s = (text or "").lower()
    s = _STRIP_RE.sub(" ", s)
    return _SPACE_RE.sub(" ", s).strip()


def tokenize(text: Optional[str], stopwords: Iterable[str] = ()) -> List[str]:
    """Return keyword tokens of ``text`` in order, duplicates kept.

    Tokens present in ``stopwords`` are dropped.
    """

    stop = stopwords if isinstance(stopwords, (set, frozenset)) else set(stopwords)
    return [t for t in normalize(text).split() if t not in stop]


def uniq(items: Iterable[str]) -> List[str]:
    """Deduplicate ``items`` keeping first occurrence order."""

    return list(dict.fromkeys(items))
