import time
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from . import __version__
from .core.snippets import make_snippet
from .interpreter import submit
from .schemas import CommandIn, Dictionary, Result, SnippetIn


def create_app(ctx):
    store = ctx.store
    scheduler = ctx.scheduler

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        autostart = (getattr(ctx, "config", {}).get("brain") or {}).get("autostart", True)
        if autostart:
            scheduler.start()
        else:
            logger.info("[brain] autostart disabled")
        try:
            yield
        finally:
            try:
                await scheduler.stop()
            except Exception as e:
                logger.debug(f"[lifespan] scheduler stop error: {e}")

    app = FastAPI(title="Command Interpreter & Pseudocode Brain", version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Simple header auth (optional)
    def _auth(x_key: str | None = Header(default=None, alias="X-Brain-Key")):
        want = (getattr(ctx, "config", {}).get("server") or {}).get("api_key")
        if want and x_key != want:
            raise HTTPException(status_code=401, detail="invalid api key")

    # ---- Health & root ----
    @app.get("/")
    async def root():
        return {"ok": True, "name": "cmdbrain", "version": __version__}

    @app.get("/health")
    async def health():
        snap = store.snapshot()
        return {
            "ok": True,
            "scheduler_running": scheduler.running,
            "commands": len(snap.commands),
            "brain_runs": len(snap.brain_runs),
            "snippets": len(snap.snippets),
        }

    api = APIRouter(dependencies=[Depends(_auth)])

    # ---- commands ----
    @api.get("/commands")
    async def list_commands():
        return [c.model_dump() for c in store.snapshot().commands]

    @api.post("/commands")
    async def post_command(body: CommandIn):
        res = submit(store, body.text, top_k=getattr(ctx, "top_k", 5))
        if res is None:
            return Result(ok=False, message="empty command ignored").model_dump()
        return Result(ok=True, message="interpreted", data=res.model_dump(mode="json")).model_dump()

    @api.delete("/commands/{command_id}")
    async def delete_command(command_id: str):
        if store.delete_command(command_id):
            return Result(ok=True, message="deleted").model_dump()
        return Result(ok=False, message=f"unknown command: {command_id}").model_dump()

    # ---- brain ----
    @api.post("/brain/run")
    async def brain_run():
        run = scheduler.run_now(trigger="manual")
        return Result(ok=True, message="brain run recorded", data=run.model_dump()).model_dump()

    @api.get("/brain/runs")
    async def brain_runs():
        return [r.model_dump() for r in store.snapshot().brain_runs]

    @api.get("/brain/plan")
    async def brain_plan():
        snap = store.snapshot()
        latest = snap.brain_runs[0].plan if snap.brain_runs else ""
        return {"ok": True, "plan": scheduler.last_plan or latest}

    # ---- snippets ----
    @api.get("/snippets")
    async def list_snippets():
        return [s.model_dump() for s in store.snapshot().snippets]

    @api.post("/snippets")
    async def post_snippet(body: SnippetIn):
        snippet = make_snippet(body.title, body.language, body.tags, body.snippet)
        if snippet is None:
            raise HTTPException(status_code=422, detail="snippet title is required")
        store.add_snippet(snippet)
        return Result(ok=True, message="snippet added", data=snippet.model_dump()).model_dump()

    # ---- dictionary ----
    @api.get("/dictionary")
    async def get_dictionary():
        return store.snapshot().dictionary.model_dump(mode="json")

    @api.put("/dictionary")
    async def put_dictionary(body: Dictionary):
        store.set_dictionary(body)
        return Result(ok=True, message="dictionary replaced").model_dump()

    @api.post("/dictionary/reset")
    async def reset_dictionary():
        store.reset_dictionary()
        return Result(ok=True, message="dictionary reset to defaults").model_dump()

    # ---- export ----
    @api.get("/export")
    async def export():
        doc = store.export().model_dump(mode="json")
        doc["exported_at"] = int(time.time() * 1000)
        return doc

    app.include_router(api)
    return app
