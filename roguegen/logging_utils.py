"""Structured key=value logging for generation runs.

    from roguegen.logging_utils import get_logger
    log = get_logger("roguegen.dungeon")
    log.info(event="level_generated", depth=3, rooms=7)

prints ``level=info ts=... event=level_generated depth=3 rooms=7
logger=roguegen.dungeon``. Debug and info records go to stdout, warnings to
stderr, so `run.py generate` can keep stdout for JSON by raising the
threshold. ROGUEGEN_LOG_LEVEL sets the starting threshold and
ROGUEGEN_LOG_JSON=1 switches to one JSON object per line.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("ROGUEGEN_LOG_LEVEL", "info"), 20)
JSON_MODE = os.getenv("ROGUEGEN_LOG_JSON", "0") in ("1", "true", "TRUE", "yes", "on")


def _format(level: str, fields: dict) -> str:
    present = {k: v for k, v in fields.items() if v is not None}
    ts = int(time.time())
    if JSON_MODE:
        return json.dumps({"level": level, "ts": ts, **present}, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={ts}"]
    for k, v in present.items():
        # spaces would split a value into two tokens
        parts.append(f"{k}={v}" if isinstance(v, (int, float)) else f"{k}={str(v).replace(' ', '_')}")
    return " ".join(parts)


def set_level(name: str) -> None:
    """Change the global threshold at runtime."""
    global CURRENT_LEVEL
    if name not in LEVELS:
        raise ValueError(f"Unknown log level: {name}")
    CURRENT_LEVEL = LEVELS[name]


class _Logger:
    def __init__(self, name: str):
        self.name = name

    def _emit(self, level: str, fields: dict) -> None:
        if LEVELS[level] < CURRENT_LEVEL:
            return
        fields.setdefault("logger", self.name)
        stream = sys.stderr if LEVELS[level] >= LEVELS["warn"] else sys.stdout
        print(_format(level, fields), file=stream)

    def debug(self, **fields):
        self._emit("debug", fields)

    def info(self, **fields):
        self._emit("info", fields)

    def warn(self, **fields):
        self._emit("warn", fields)


_LOGGERS = {}


def get_logger(name: str) -> _Logger:
    if name not in _LOGGERS:
        _LOGGERS[name] = _Logger(name)
    return _LOGGERS[name]


log = get_logger("roguegen")

__all__ = ["LEVELS", "get_logger", "log", "set_level"]
