from __future__ import annotations

import os
import time

from fastapi import APIRouter, Request

import eramint

router = APIRouter()


def _now_ms() -> int:
    return int(time.time() * 1000)


@router.get("/health")
def health(request: Request):
    sched = getattr(request.app.state, "schedule", None)
    width = getattr(request.app.state, "width", None)
    return {
        "ok": True,
        "service": "eramint",
        "version": eramint.__version__,
        "mode": os.environ.get("ERAMINT_MODE", "prod").strip().lower(),
        "ts_ms": _now_ms(),
        "policies": len(sched.activations) if sched is not None else 0,
        "supply_width": width.name if width is not None else None,
    }
