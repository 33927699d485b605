import copy
import os
import sys
from typing import Any, Dict

import yaml
from loguru import logger

from .kvstore import JsonFileStore
from .scheduler import BrainScheduler
from .store import BrainStore

DEFAULT_CONFIG: Dict[str, Any] = {
    "server": {"host": "127.0.0.1", "port": 8765, "api_key": None},
    "storage": {"dir": "data"},
    "brain": {"interval_minutes": 9, "history_limit": 30, "autostart": True},
    "ranking": {"top_k": 5},
    "logging": {"level": "INFO", "dir": None, "rotation": "10 MB", "retention": "14 days"},
}


def _merge(base: Dict[str, Any], over: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in (over or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def load_config(path: str = "config.yaml") -> Dict[str, Any]:
    """Read ``path`` over the built-in defaults; a missing file means defaults."""
    if not os.path.exists(path):
        logger.warning(f"[config] {path} not found; using defaults")
        return copy.deepcopy(DEFAULT_CONFIG)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"[config] {path} unreadable ({e}); using defaults")
        return copy.deepcopy(DEFAULT_CONFIG)
    if not isinstance(data, dict):
        logger.error(f"[config] {path} is not a mapping; using defaults")
        return copy.deepcopy(DEFAULT_CONFIG)
    return _merge(DEFAULT_CONFIG, data)


def setup_logging(config: Dict[str, Any]) -> None:
    """stderr sink plus an optional rotating file sink (10MB, 14 days, zip)."""
    lc = config.get("logging") or {}
    level = str(lc.get("level") or "INFO").upper()
    logger.remove()
    logger.add(sys.stderr, level=level)
    log_dir = lc.get("dir")
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        logger.add(
            os.path.join(log_dir, "cmdbrain_{time}.log"),
            rotation=lc.get("rotation") or "10 MB",
            retention=lc.get("retention") or "14 days",
            compression="zip",
            enqueue=True,
            backtrace=True,
            diagnose=False,
            level=level,
        )


class Ctx:
    def __init__(self, config: Dict[str, Any], kv=None):
        self.config = config
        self.kv = kv or JsonFileStore(config["storage"]["dir"])
        self.store = BrainStore(self.kv, history_limit=config["brain"]["history_limit"])
        self.scheduler = BrainScheduler(
            self.store,
            interval_sec=float(config["brain"]["interval_minutes"]) * 60,
        )
        self.top_k = max(1, int(config["ranking"]["top_k"]))
