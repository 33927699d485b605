import argparse

import uvicorn
from loguru import logger

from .context import Ctx, load_config, setup_logging
from .server import create_app


def main(argv=None):
    ap = argparse.ArgumentParser(prog="cmdbrain-server", description="Run the cmdbrain HTTP service")
    ap.add_argument("--config", default="config.yaml", help="path to config.yaml")
    args = ap.parse_args(argv)

    cfg = load_config(args.config)
    setup_logging(cfg)
    ctx = Ctx(cfg)
    app = create_app(ctx)

    host = (cfg.get("server") or {}).get("host", "127.0.0.1")
    port = int((cfg.get("server") or {}).get("port", 8765))

    logger.info(f"[server] starting on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
