"""Opt-in trace file for CLI runs.

Each event is one line: `<utc iso time> event=<name> key=value ...`, keys
sorted. Values holding whitespace or quotes are JSON-quoted, so a value
never runs into the next key; decimals are written in plain notation.
"""

from __future__ import annotations

import datetime as dt
import json
import os
from decimal import Decimal
from pathlib import Path

TRACE_LOG_ENV = "HLTAS_ANALYZER_TRACE_LOG"

_trace_path: Path | None = None


def _format_value(value: object) -> str:
    if isinstance(value, Decimal):
        return format(value, "f")
    text = str(value)
    if not text or any(ch.isspace() or ch == '"' for ch in text):
        return json.dumps(text)
    return text


def _format_fields(fields: dict[str, object]) -> str:
    return " ".join(f"{key}={_format_value(fields[key])}" for key in sorted(fields))


def debug_log_path() -> Path | None:
    return _trace_path


def resolve_debug_log_path(path: Path | None = None) -> Path | None:
    if path is not None:
        return Path(path)
    raw = os.environ.get(TRACE_LOG_ENV, "").strip()
    if not raw:
        return None
    return Path(raw)


def init_debug_log(path: Path, *, command: str) -> Path:
    global _trace_path

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    _trace_path = path
    debug_log("init", command=command, pid=os.getpid())
    return path


def close_debug_log() -> None:
    global _trace_path

    _trace_path = None


def debug_log(event: str, **fields: object) -> None:
    if _trace_path is None:
        return
    timestamp = dt.datetime.now(dt.timezone.utc).isoformat(timespec="milliseconds")
    line = f"{timestamp} event={event}"
    if fields:
        line += f" {_format_fields(fields)}"
    with _trace_path.open("a", encoding="utf-8") as handle:
        handle.write(line + "\n")
