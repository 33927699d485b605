"""Compiled-in dictionary and snippet library.

Both are used whenever persisted data is missing or malformed.  Extend them
freely; callers always receive fresh copies.
"""

from __future__ import annotations

from typing import List

from .schemas import Dictionary, RewriteRule, Snippet

_SYNONYMS = {
    "build": ["create", "make", "construct", "generate"],
    "website": ["webapp", "site", "web site", "frontend"],
    "command": ["instruction", "prompt", "order"],
    "interpret": ["parse", "understand", "analyze"],
    "refine": ["improve", "polish", "clarify"],
    "keywords": ["terms", "tokens", "tags"],
    "template": ["schema", "blueprint", "pattern"],
    "logic": ["rules", "reasoning", "inference"],
    "code": ["program", "source", "implementation"],
    "snippet": ["example", "sample", "fragment"],
    "schedule": ["cron", "interval", "timer"],
}

_ANTONYMS = {
    "build": ["destroy"],
    "similar": ["different", "opposite"],
    "create": ["delete"],
    "include": ["exclude"],
    "allow": ["forbid", "deny"],
}

_STOPWORDS = {
    "the", "a", "an", "and", "or", "but", "of", "to", "in", "on",
    "for", "with", "by", "is", "are", "be", "it", "this", "that",
}

# order matters: later rules see the output of earlier ones
_REPLACEMENTS = [
    (r"\bkind of\b", "somewhat"),
    (r"\bsort of\b", "partially"),
    (r"\bvery\b", "highly"),
    (r"\b\s+and\s+and\b", " and "),
    (r"\s{2,}", " "),
    (r"\s+([,.;:])", r"\1"),
]

_SNIPPETS = [
    {
        "id": "py-requests-get",
        "language": "python",
        "title": "HTTP GET via requests",
        "tags": ["http", "get", "network", "fetch"],
        "snippet": "import requests\nresp = requests.get(url, timeout=10)\nprint(resp.text)",
    },
    {
        "id": "js-fetch-get",
        "language": "javascript",
        "title": "HTTP GET via fetch",
        "tags": ["http", "get", "network", "fetch"],
        "snippet": "const resp = await fetch(url);\nconst text = await resp.text();\nconsole.log(text);",
    },
    {
        "id": "py-sqlite",
        "language": "python",
        "title": "SQLite query",
        "tags": ["db", "sqlite", "query", "select"],
        "snippet": (
            "import sqlite3\ncon = sqlite3.connect('app.db')\ncur = con.cursor()\n"
            "for row in cur.execute('SELECT * FROM items'):\n    print(row)"
        ),
    },
    {
        "id": "js-sqlite-wasm",
        "language": "javascript",
        "title": "SQLite (WASM) demo",
        "tags": ["db", "sqlite", "query", "select"],
        "snippet": (
            "// using sql.js (WASM)\n// const db = new SQL.Database();\n"
            "// const res = db.exec('SELECT 1');\n// console.log(res);"
        ),
    },
    {
        "id": "py-regex",
        "language": "python",
        "title": "Regex substitution",
        "tags": ["regex", "replace", "text"],
        "snippet": 'import re\ntext = re.sub(r"foo", "bar", text)',
    },
    {
        "id": "js-regex",
        "language": "javascript",
        "title": "Regex replacement",
        "tags": ["regex", "replace", "text"],
        "snippet": "const result = text.replace(/foo/g, 'bar');",
    },
]


def default_dictionary() -> Dictionary:
    return Dictionary(
        synonyms={k: list(v) for k, v in _SYNONYMS.items()},
        antonyms={k: list(v) for k, v in _ANTONYMS.items()},
        stopwords=set(_STOPWORDS),
        replacements=[RewriteRule(pattern=p, replace=r) for p, r in _REPLACEMENTS],
    )


def default_snippets() -> List[Snippet]:
    return [Snippet(**s) for s in _SNIPPETS]
