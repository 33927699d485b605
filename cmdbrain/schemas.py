from __future__ import annotations

import re
import time
import uuid
from typing import Any, Dict, List, Optional, Set, Union

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator


# leading inline flags such as (?i) must stay at the front of a pattern
_LEADING_FLAGS_RE = re.compile(r"^(?:\(\?[aiLmsux]+\))+")


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now() -> str:
    """ISO-8601 UTC timestamp with millisecond precision."""
    now = time.time()
    ms = int((now - int(now)) * 1000)
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(now)) + f".{ms:03d}Z"


class RewriteRule(BaseModel):
    pattern: str = Field(..., description="Python regular expression")
    replace: str = Field(..., description="replacement, \\1 style backrefs")
    ignore_case: bool = True

    @field_validator("pattern")
    @classmethod
    def _compiles(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid pattern {v!r}: {e}")
        return v

    @model_validator(mode="after")
    def _replacement_expands(self) -> "RewriteRule":
        """Expand ``replace`` against an empty match carrying the pattern's groups.

        Bad escapes, a trailing backslash and unknown group numbers or names
        all surface here instead of on the first ``sub`` call.
        """
        pat = re.compile(self.pattern)
        body = _LEADING_FLAGS_RE.sub("", self.pattern)
        # the newline closes a trailing comment under re.VERBOSE
        empty = re.compile(f"(?:{body}\n)|", pat.flags)
        try:
            empty.match("").expand(self.replace)
        except (re.error, IndexError) as e:
            raise ValueError(f"invalid replacement {self.replace!r}: {e}")
        return self

    def compiled(self) -> re.Pattern:
        return re.compile(self.pattern, re.IGNORECASE if self.ignore_case else 0)


class Dictionary(BaseModel):
    synonyms: Dict[str, List[str]] = Field(default_factory=dict)
    antonyms: Dict[str, List[str]] = Field(default_factory=dict)
    stopwords: Set[str] = Field(default_factory=set)
    replacements: List[RewriteRule] = Field(default_factory=list)

    @field_serializer("stopwords")
    def _sorted_stopwords(self, v: Set[str]) -> List[str]:
        return sorted(v)


class Command(BaseModel):
    id: str = Field(default_factory=new_id)
    raw: str
    created_at: str = Field(default_factory=utc_now)

    model_config = {"frozen": True}


class Snippet(BaseModel):
    id: str = Field(default_factory=new_id)
    language: str = "text"
    title: str
    tags: List[str] = Field(default_factory=list)
    snippet: str = ""


class BrainRun(BaseModel):
    id: str = Field(default_factory=new_id)
    created_at: str = Field(default_factory=utc_now)
    plan: str
    trigger: str = "manual"  # "timer" | "manual"


class ScoredCommand(BaseModel):
    id: str
    raw: str
    created_at: str
    score: float = 0.0


class InterpretationResult(BaseModel):
    command: Command
    tokens: List[str] = Field(default_factory=list)
    expanded: List[str] = Field(default_factory=list)
    antonyms: List[str] = Field(default_factory=list)
    similarity: int = 0    # 0..1000
    difference: int = 0    # 0..1000
    similar: List[ScoredCommand] = Field(default_factory=list)
    different: List[ScoredCommand] = Field(default_factory=list)
    opposite: List[ScoredCommand] = Field(default_factory=list)
    snippets: List[Snippet] = Field(default_factory=list)
    interpretation: str = ""
    enhanced: str = ""
    plan: str = ""


class ExportDocument(BaseModel):
    commands: List[Command] = Field(default_factory=list)
    brain_runs: List[BrainRun] = Field(default_factory=list)
    snippets: List[Snippet] = Field(default_factory=list)
    dictionary: Dictionary = Field(default_factory=Dictionary)


# ---- request bodies --------------------------------------------------------

class CommandIn(BaseModel):
    text: str = Field(..., description="e.g. 'make a website that fetches data'")


class SnippetIn(BaseModel):
    title: str
    language: Optional[str] = None
    tags: Union[str, List[str], None] = None  # list or "a, b, c"
    snippet: str = ""


class Result(BaseModel):
    ok: bool = True
    message: str = ""
    data: Optional[Dict[str, Any]] = None
