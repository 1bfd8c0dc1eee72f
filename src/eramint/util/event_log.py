from __future__ import annotations

import json
import logging
import time
from enum import Enum
from typing import Any, Dict

Json = Dict[str, Any]

# Largest integer a float64 JSON reader keeps exactly. Supply amounts above it
# are written as decimal strings so u128 payouts survive log pipelines.
MAX_SAFE_JSON_INT = 2**53 - 1


def _field(v: Any) -> Any:
    if isinstance(v, bool) or v is None:
        return v
    if isinstance(v, Enum):
        return _field(v.value)
    if isinstance(v, int):
        return v if -MAX_SAFE_JSON_INT <= v <= MAX_SAFE_JSON_INT else str(v)
    if isinstance(v, dict):
        return {str(k): _field(x) for k, x in v.items()}
    if isinstance(v, (list, tuple)):
        return [_field(x) for x in v]
    if hasattr(v, "parts") and hasattr(v, "ACCURACY"):
        # fixed-point rate
        return str(v)
    return v


def log_event(logger: logging.Logger, event: str, *, level: int = logging.INFO, **fields: Any) -> None:
    """Log one ledger event as a single JSON line.

    Fields are flattened into the object next to `ts_ms` and `event`. Phases
    and rates are written by value, and amounts too large for a JSON number
    become strings. If a field still cannot be encoded the line degrades to
    `event=<name> key=repr ...`.
    """
    if not logger.isEnabledFor(level):
        return
    payload: Json = {"ts_ms": int(time.time() * 1000), "event": str(event)}
    payload.update({k: _field(v) for k, v in fields.items()})
    try:
        line = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        line = " ".join([f"event={event}"] + [f"{k}={fields[k]!r}" for k in sorted(fields)])
    logger.log(level, line)
