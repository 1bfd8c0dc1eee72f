# src/eramint/api/structured_logging.py
from __future__ import annotations

import logging
import os
import time
import uuid
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from eramint.util.event_log import log_event

_OFF = {"0", "false", "no", "n", "off"}

# Query values are echoed into the log; supply params can be arbitrarily long.
_MAX_LOGGED_PARAM = 64


def configure_structured_logging(level_name: Optional[str] = None) -> None:
    """Send every logger to stdout, one JSON line per record.

    The level comes from `level_name`, else ERAMINT_LOG_LEVEL, else INFO.
    A second call only changes the level.
    """
    name = (level_name or os.environ.get("ERAMINT_LOG_LEVEL") or "INFO").strip().upper()
    level = getattr(logging, name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    if getattr(root, "_eramint_configured", False):  # type: ignore[attr-defined]
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.handlers = [handler]
    setattr(root, "_eramint_configured", True)  # type: ignore[attr-defined]


def _param(request: Request, name: str) -> Optional[str]:
    v = request.query_params.get(name)
    if v is None:
        return None
    return v if len(v) <= _MAX_LOGGED_PARAM else v[:_MAX_LOGGED_PARAM] + "..."


class RequestLogMiddleware(BaseHTTPMiddleware):
    """One `http_request` event per call, tagged with the era asked about.

    Client errors log at WARNING and server errors at ERROR. Set
    ERAMINT_LOG_REQUESTS=0 to turn it off.
    """

    def __init__(self, app) -> None:
        super().__init__(app)
        raw = (os.environ.get("ERAMINT_LOG_REQUESTS") or "1").strip().lower()
        self._enabled = raw not in _OFF
        self._logger = logging.getLogger("eramint.http")

    async def dispatch(self, request: Request, call_next):
        if not self._enabled:
            return await call_next(request)

        started = time.monotonic()
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        status = 500
        err: Optional[str] = None
        try:
            response = await call_next(request)
            status = int(response.status_code)
            response.headers.setdefault("x-request-id", request_id)
            return response
        except Exception as e:
            err = type(e).__name__
            raise
        finally:
            level = logging.ERROR if status >= 500 else logging.WARNING if status >= 400 else logging.INFO
            log_event(
                self._logger,
                "http_request",
                level=level,
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                era=_param(request, "era"),
                status=status,
                duration_ms=int((time.monotonic() - started) * 1000),
                error=err,
            )
