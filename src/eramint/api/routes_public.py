# src/eramint/api/routes_public.py
from __future__ import annotations

from fastapi import APIRouter

from eramint.api.routes_public_parts.health import router as health_router
from eramint.api.routes_public_parts.inflation import router as inflation_router

public_router = APIRouter()

# Versioned API surface
public_router.include_router(health_router, prefix="/v1", tags=["health"])
public_router.include_router(inflation_router, prefix="/v1", tags=["inflation"])
