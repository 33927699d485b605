"""Command line front end.

Usage:
  cmdbrain interpret "build a website that fetches data"
  cmdbrain list
  cmdbrain delete COMMAND_ID
  cmdbrain brain
  cmdbrain add-snippet --title "HTTP GET" --language python --tags http,get --body-file get.py
  cmdbrain export [--out FILE]
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

from loguru import logger

from .context import Ctx, load_config, setup_logging
from .core.snippets import make_snippet
from .interpreter import submit


def _dump(obj) -> None:
    print(json.dumps(obj, indent=2, ensure_ascii=False))


def cmd_interpret(ctx: Ctx, args) -> int:
    text = " ".join(args.text) if args.text else sys.stdin.read()
    res = submit(ctx.store, text, top_k=ctx.top_k)
    if res is None:
        print("EMPTY")
        return 1
    if args.json:
        _dump(res.model_dump(mode="json"))
        return 0
    print(res.enhanced)
    print()
    print(f"Similarity: {res.similarity}  Difference: {res.difference}")
    for label, items in (("Similar", res.similar), ("Opposite", res.opposite), ("Different", res.different)):
        if items:
            print(f"{label}:")
            for s in items:
                print(f"  [{s.score:.3f}] {s.raw}")
    if res.snippets:
        print("Snippets:")
        for s in res.snippets:
            print(f"  {s.title} ({s.language}) tags: {', '.join(s.tags)}")
    return 0


def cmd_list(ctx: Ctx, _args) -> int:
    for c in reversed(ctx.store.snapshot().commands):
        print(f"{c.id}  {c.created_at}  {c.raw}")
    return 0


def cmd_delete(ctx: Ctx, args) -> int:
    if ctx.store.delete_command(args.id):
        print(f"deleted {args.id}")
        return 0
    print(f"ERR: unknown command {args.id}")
    return 1


def cmd_brain(ctx: Ctx, _args) -> int:
    run = ctx.scheduler.run_now(trigger="manual")
    print(run.plan)
    return 0


def cmd_add_snippet(ctx: Ctx, args) -> int:
    body = args.body or ""
    if args.body_file:
        body = Path(args.body_file).read_text(encoding="utf-8")
    snippet = make_snippet(args.title, args.language, args.tags, body)
    if snippet is None:
        print("ERR: missing title")
        return 2
    ctx.store.add_snippet(snippet)
    print(f"added snippet {snippet.id} ({snippet.language}) tags={snippet.tags}")
    return 0


def cmd_export(ctx: Ctx, args) -> int:
    out = Path(args.out or f"cmdbrain-export-{int(time.time() * 1000)}.json")
    doc = ctx.store.export().model_dump(mode="json")
    out.write_text(json.dumps(doc, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"exported to {out}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="cmdbrain", description=__doc__.split("\n")[0])
    ap.add_argument("--config", default="config.yaml")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p = sub.add_parser("interpret", help="interpret and record a command")
    p.add_argument("text", nargs="*")
    p.add_argument("--json", action="store_true", help="print the full result as JSON")
    p.set_defaults(func=cmd_interpret)

    p = sub.add_parser("list", help="list commands, newest first")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("delete", help="delete a command by id")
    p.add_argument("id")
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("brain", help="run the plan synthesizer now")
    p.set_defaults(func=cmd_brain)

    p = sub.add_parser("add-snippet", help="add a snippet to the library")
    p.add_argument("--title", required=True)
    p.add_argument("--language", default="text")
    p.add_argument("--tags", default="", help="comma separated")
    p.add_argument("--body", default="")
    p.add_argument("--body-file")
    p.set_defaults(func=cmd_add_snippet)

    p = sub.add_parser("export", help="write all collections to a JSON file")
    p.add_argument("--out")
    p.set_defaults(func=cmd_export)
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    cfg = load_config(args.config)
    setup_logging(cfg)
    ctx = Ctx(cfg)
    try:
        return args.func(ctx, args)
    except OSError as e:
        logger.error(f"[cli] {args.cmd} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
