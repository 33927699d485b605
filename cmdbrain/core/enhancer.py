"""One pass text enhancement.

Each rewrite rule is applied exactly once, globally, in declared order.  The
result is not re-fed through the rules, so it is not necessarily a fixed
point: a later rule can produce text an earlier rule would have matched.
"""

from __future__ import annotations

from typing import Iterable


def enhance_once(text: str, rules: Iterable) -> str:
    """Apply ``rules`` (objects with ``compiled()`` and ``replace``) to ``text``."""

    out = text or ""
    for rule in rules:
        out = rule.compiled().sub(rule.replace, out)
    return out.strip()
