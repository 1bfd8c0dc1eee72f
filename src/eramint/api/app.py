from __future__ import annotations

import os
from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eramint.api.errors import ApiError, api_error_handler
from eramint.api.routes_public import public_router
from eramint.api.structured_logging import RequestLogMiddleware
from eramint.ledger.policy import DEFAULT_SCHEDULE, PolicySchedule
from eramint.ledger.supply import U128, UIntWidth
from eramint.runtime.mint_config import load_mint_config, load_policy_schedule


def _parse_cors_origins() -> List[str]:
    """Parse CORS origins with production-safe defaults.

    Policy:
      - If ERAMINT_CORS_ORIGINS is unset/empty -> CORS disabled (fail-closed)
      - Wildcard "*" is rejected in ERAMINT_MODE=prod
      - In non-prod modes, "*" is allowed for convenience
    """
    raw = os.environ.get("ERAMINT_CORS_ORIGINS", "").strip()
    mode = os.environ.get("ERAMINT_MODE", "prod").strip().lower()

    if not raw:
        return []

    origins = [o.strip() for o in raw.split(",") if o.strip()]

    if "*" in origins:
        if mode == "prod":
            raise RuntimeError(
                "Unsafe CORS configuration: wildcard '*' not allowed in production. "
                "Set explicit origins in ERAMINT_CORS_ORIGINS."
            )
        return ["*"]

    return origins


def create_app(
    *,
    boot_runtime: bool = True,
    schedule: Optional[PolicySchedule] = None,
    width: Optional[UIntWidth] = None,
) -> FastAPI:
    """Create the FastAPI application.

    boot_runtime:
      - True (default): load mint config + policy schedule from disk/env
      - False: built-in reference schedule at u128, for unit tests

    Explicit schedule/width arguments win over both.
    """
    mode = os.environ.get("ERAMINT_MODE", "prod").strip().lower()

    # Disable docs in production.
    if mode == "prod":
        app = FastAPI(title="eramint API", docs_url=None, redoc_url=None, openapi_url=None)
    else:
        app = FastAPI(title="eramint API")

    if boot_runtime:
        cfg = load_mint_config()
        app.state.cfg = cfg
        app.state.schedule = schedule or load_policy_schedule(cfg)
        app.state.width = width or cfg.width
    else:
        app.state.cfg = None
        app.state.schedule = schedule or DEFAULT_SCHEDULE
        app.state.width = width or U128

    app.add_exception_handler(ApiError, api_error_handler)

    # --- Middleware ---
    app.add_middleware(RequestLogMiddleware)

    cors_origins = _parse_cors_origins()
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=False,
            allow_methods=["GET", "OPTIONS"],
            allow_headers=["Content-Type"],
        )

    # --- Routers ---
    app.include_router(public_router)

    return app
