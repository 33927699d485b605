"""Dictionary driven keyword expansion.

Expansion is single level: a synonym of a synonym is never added.  Callers
that want a transitive closure must build it into the dictionary itself.
"""

from __future__ import annotations

from typing import Iterable, List, Mapping, Sequence


def _lookup(table: Mapping[str, Sequence[str]], tokens: Iterable[str]) -> List[str]:
    out: List[str] = []
    for tok in tokens:
        for word in table.get(tok) or ():
            out.append(word)
    return out


def expand_synonyms(tokens: Sequence[str], dictionary) -> List[str]:
    """Return ``tokens`` plus their directly mapped synonyms.

    Original tokens come first in their own order, newly discovered synonyms
    follow in dictionary declaration order.  No duplicates.
    """

    table = getattr(dictionary, "synonyms", None) or {}
    return list(dict.fromkeys([*tokens, *_lookup(table, tokens)]))


def antonyms_of(tokens: Sequence[str], dictionary) -> List[str]:
    """Union of the antonyms mapped for ``tokens``; empty when none match."""

    table = getattr(dictionary, "antonyms", None) or {}
    return list(dict.fromkeys(_lookup(table, tokens)))
