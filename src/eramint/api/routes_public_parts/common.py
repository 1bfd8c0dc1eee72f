from __future__ import annotations

from typing import Any, Optional

from fastapi import Request

from eramint.api.errors import ApiError
from eramint.ledger.policy import PolicySchedule
from eramint.ledger.supply import REFERENCE_WIDTH, UIntWidth

# Any value with more digits than this is past every supported width.
_MAX_DIGITS = len(str(REFERENCE_WIDTH.max_value))


def _schedule(request: Request) -> PolicySchedule:
    sched = getattr(request.app.state, "schedule", None)
    if sched is None:
        raise ApiError.internal("not_ready", "policy schedule not attached to app.state", {})
    return sched


def _width(request: Request) -> UIntWidth:
    w = getattr(request.app.state, "width", None)
    if w is None:
        raise ApiError.internal("not_ready", "supply width not attached to app.state", {})
    return w


def _uint_param(request: Request, name: str, *, required: bool) -> Optional[int]:
    """Parse a non-negative integer query param.

    Supply amounts may exceed the width; the evaluator saturates them, so only
    syntax and sign are checked here. Overlong digit strings are cut to a
    value just past the reference width instead of being converted in full.
    """
    v: Any = request.query_params.get(name)
    if v is None or str(v).strip() == "":
        if required:
            raise ApiError.bad_request("missing_param", f"missing query param: {name}", {"param": name})
        return None
    s = str(v).strip().replace("_", "")
    if not s.isascii() or not s.isdigit():
        raise ApiError.bad_request(
            "invalid_param", f"{name} must be a non-negative integer", {"param": name, "value": str(v)}
        )
    digits = s.lstrip("0")
    if len(digits) > _MAX_DIGITS:
        return REFERENCE_WIDTH.max_value + 1
    return int(digits or "0")
