"""Minimal structured event logging.

Emits one ``key=value`` line per event (or one JSON object when
``ENDLESS_LOG_JSON`` is truthy) with a level, a timestamp and the logger name.
Level threshold comes from ``ENDLESS_LOG_LEVEL`` (debug|info|warn|error).

Usage:
    from endless_dungeon.logging_utils import get_logger
    log = get_logger("maze")
    log.info(event="maze_built", cols=35, rows=23)

None values are dropped; strings have spaces replaced so lines stay splittable.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}


def _threshold() -> int:
    return LEVELS.get(os.getenv("ENDLESS_LOG_LEVEL", "info").lower(), 20)


def _json_mode() -> bool:
    return os.getenv("ENDLESS_LOG_JSON", "0").lower() in ("1", "true", "yes", "on")


def format_record(level: str, **fields) -> str:
    ts = int(time.time())
    if _json_mode():
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = ts
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={ts}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (bool, int, float)):
            parts.append(f"{k}={v}")
        else:
            parts.append(f"{k}={str(v).replace(' ', '_')}")
    return " ".join(parts)


class EventLogger:
    def __init__(self, name: str):
        self.name = name

    def _log(self, level: str, **fields):
        if LEVELS[level] < _threshold():
            return
        fields.setdefault("logger", self.name)
        stream = sys.stderr if level == "error" else sys.stdout
        print(format_record(level, **fields), file=stream)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE = {}


def get_logger(name: str) -> EventLogger:
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = EventLogger(name)
    return _LOGGER_CACHE[name]


log = get_logger("endless")
