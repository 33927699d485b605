"""Explicitly owned application state.

:class:`BrainStore` owns the command log, dictionary, snippet library and
brain-run history.  Collections are immutable tuples (or a model instance for
the dictionary) that are *replaced* on every write, so a :class:`Snapshot`
taken under the lock can never observe a half-applied change.  Each write is
persisted through the injected key-value store and then announced to the
handlers subscribed to that collection.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from .defaults import default_dictionary, default_snippets
from .kvstore import KEYS, KeyValueStore
from .schemas import BrainRun, Command, Dictionary, ExportDocument, Snippet

DEFAULT_HISTORY_LIMIT = 30

_ADAPTERS: Dict[str, TypeAdapter] = {
    "commands": TypeAdapter(List[Command]),
    "brain_runs": TypeAdapter(List[BrainRun]),
    "snippets": TypeAdapter(List[Snippet]),
    "dictionary": TypeAdapter(Dictionary),
}


@dataclass(frozen=True)
class Snapshot:
    commands: Tuple[Command, ...]
    dictionary: Dictionary
    snippets: Tuple[Snippet, ...]
    brain_runs: Tuple[BrainRun, ...]


class BrainStore:
    def __init__(self, kv: KeyValueStore, history_limit: int = DEFAULT_HISTORY_LIMIT):
        self.kv = kv
        self.history_limit = max(1, int(history_limit))
        self._lock = threading.RLock()
        self.subscribers: Dict[str, List[Callable[[str], None]]] = {}

        self.commands: Tuple[Command, ...] = tuple(self._load("commands", list))
        self.dictionary: Dictionary = self._load("dictionary", default_dictionary)
        self.snippets: Tuple[Snippet, ...] = tuple(self._load("snippets", default_snippets))
        runs = self._load("brain_runs", list)
        self.brain_runs: Tuple[BrainRun, ...] = tuple(runs[: self.history_limit])

    # ---- persistence -------------------------------------------------------

    def _load(self, name: str, default_factory: Callable[[], Any]) -> Any:
        raw = self.kv.load(KEYS[name], None)
        if raw is None:
            return default_factory()
        try:
            return _ADAPTERS[name].validate_python(raw)
        except ValidationError as e:
            logger.warning(f"[store] malformed {name}, using defaults ({e.error_count()} errors)")
            return default_factory()

    def _save(self, name: str, value: Any) -> None:
        if isinstance(value, tuple):
            value = list(value)
        self.kv.save(KEYS[name], _ADAPTERS[name].dump_python(value, mode="json"))

    # ---- change notification -----------------------------------------------

    def subscribe(self, prefix: str, handler: Callable[[str], None]) -> None:
        """Call ``handler(name)`` after writes to collections starting with ``prefix``."""
        self.subscribers.setdefault(prefix, []).append(handler)

    def _notify(self, name: str) -> None:
        for prefix, handlers in list(self.subscribers.items()):
            if not name.startswith(prefix):
                continue
            for h in list(handlers):
                try:
                    h(name)
                except Exception as ex:
                    logger.exception(f"[store] subscriber error for {name}: {ex}")

    # ---- reads -------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator["BrainStore"]:
        """Hold the store lock across a read-then-write sequence."""
        with self._lock:
            yield self

    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot(
                commands=self.commands,
                dictionary=self.dictionary,
                snippets=self.snippets,
                brain_runs=self.brain_runs,
            )

    def export(self) -> ExportDocument:
        snap = self.snapshot()
        return ExportDocument(
            commands=list(snap.commands),
            brain_runs=list(snap.brain_runs),
            snippets=list(snap.snippets),
            dictionary=snap.dictionary,
        )

    # ---- writes ------------------------------------------------------------

    def append_command(self, raw: str) -> Optional[Command]:
        """Append a command; blank text is dropped and ``None`` returned."""
        raw = (raw or "").strip()
        if not raw:
            return None
        return self.add_command(Command(raw=raw))

    def add_command(self, cmd: Command) -> Command:
        with self._lock:
            self.commands = self.commands + (cmd,)
            self._save("commands", self.commands)
        logger.info(f"[store] command {cmd.id} appended ({len(self.commands)} total)")
        self._notify("commands")
        return cmd

    def delete_command(self, command_id: str) -> bool:
        with self._lock:
            kept = tuple(c for c in self.commands if c.id != command_id)
            if len(kept) == len(self.commands):
                return False
            self.commands = kept
            self._save("commands", self.commands)
        logger.info(f"[store] command {command_id} deleted")
        self._notify("commands")
        return True

    def add_snippet(self, snippet: Snippet) -> Snippet:
        with self._lock:
            self.snippets = self.snippets + (snippet,)
            self._save("snippets", self.snippets)
        logger.info(f"[store] snippet {snippet.id} added ({snippet.language})")
        self._notify("snippets")
        return snippet

    def set_dictionary(self, dictionary: Dictionary) -> Dictionary:
        with self._lock:
            self.dictionary = dictionary
            self._save("dictionary", self.dictionary)
        logger.info(
            f"[store] dictionary replaced: {len(dictionary.synonyms)} synonyms, "
            f"{len(dictionary.antonyms)} antonyms, {len(dictionary.stopwords)} stopwords"
        )
        self._notify("dictionary")
        return dictionary

    def reset_dictionary(self) -> Dictionary:
        return self.set_dictionary(default_dictionary())

    def record_run(self, run: BrainRun) -> Tuple[BrainRun, ...]:
        """Put ``run`` at the front of the history, evicting the oldest."""
        with self._lock:
            self.brain_runs = ((run,) + self.brain_runs)[: self.history_limit]
            self._save("brain_runs", self.brain_runs)
            runs = self.brain_runs
        self._notify("brain_runs")
        return runs
