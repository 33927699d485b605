"""Command interpretation pipeline.

raw text -> tokens -> expanded keywords -> history ranking + snippet ranking
-> verbose template -> one-time enhancement.
"""

from __future__ import annotations

from typing import Optional, Sequence

from loguru import logger

from .core.enhancer import enhance_once
from .core.lexicon import antonyms_of, expand_synonyms
from .core.plan import synthesize_plan
from .core.similarity import Scored, rank_history
from .core.snippets import rank_snippets
from .core.template import build_verbose_template
from .core.text import tokenize
from .schemas import Command, Dictionary, InterpretationResult, ScoredCommand, Snippet
from .store import BrainStore

TOP_K = 5


def _scored(items: Sequence[Scored]):
    return [
        ScoredCommand(id=s.item.id, raw=s.item.raw, created_at=s.item.created_at, score=s.score)
        for s in items
    ]


def analyze(
    command: Command,
    history: Sequence[Command],
    dictionary: Dictionary,
    snippets: Sequence[Snippet],
    top_k: int = TOP_K,
) -> InterpretationResult:
    """Interpret ``command`` against ``history`` without touching any state."""

    raw = command.raw
    tokens = tokenize(raw, dictionary.stopwords)
    expanded = expand_synonyms(tokens, dictionary)
    antonyms = antonyms_of(tokens, dictionary)

    ranking = rank_history(tokens, history, dictionary, top_k=top_k)
    template = build_verbose_template(
        raw, tokens, expanded, antonyms, ranking.similarity, ranking.difference
    )
    enhanced = enhance_once(template, dictionary.replacements)
    picks = rank_snippets(snippets, expanded, top_k=top_k)

    return InterpretationResult(
        command=command,
        tokens=tokens,
        expanded=expanded,
        antonyms=antonyms,
        similarity=ranking.similarity,
        difference=ranking.difference,
        similar=_scored(ranking.similar),
        different=_scored(ranking.different),
        opposite=_scored(ranking.opposite),
        snippets=list(picks),
        interpretation=template,
        enhanced=enhanced,
        plan=synthesize_plan([*history, command], dictionary),
    )


def submit(store: BrainStore, text: str, top_k: int = TOP_K) -> Optional[InterpretationResult]:
    """Interpret ``text`` against the current log, then append it.

    Blank input is ignored and ``None`` returned.  Ranking and the append
    happen under one store transaction, so the scheduler sees the log either
    before or after this submission, never in between.  The command is only
    appended once analysis has succeeded.
    """

    raw = (text or "").strip()
    if not raw:
        logger.debug("[interpret] blank command ignored")
        return None

    command = Command(raw=raw)
    with store.transaction():
        snap = store.snapshot()
        result = analyze(command, snap.commands, snap.dictionary, snap.snippets, top_k=top_k)
        store.add_command(command)

    logger.info(
        f"[interpret] {command.id}: {len(result.tokens)} tokens, "
        f"similarity={result.similarity} difference={result.difference}"
    )
    return result
