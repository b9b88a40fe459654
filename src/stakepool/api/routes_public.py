# src/stakepool/api/routes_public.py
from __future__ import annotations

from fastapi import APIRouter

from stakepool.api.routes_public_parts.admin import router as admin_router
from stakepool.api.routes_public_parts.events import router as events_router
from stakepool.api.routes_public_parts.health import router as health_router
from stakepool.api.routes_public_parts.metrics import router as metrics_router
from stakepool.api.routes_public_parts.positions import router as positions_router
from stakepool.api.routes_public_parts.staking import router as staking_router

public_router = APIRouter()

public_router.include_router(health_router, tags=["health"])
public_router.include_router(positions_router, tags=["positions"])
public_router.include_router(staking_router, tags=["staking"])
public_router.include_router(events_router, tags=["events"])

# Owner surface (bearer token)
public_router.include_router(admin_router, tags=["admin"])

# Ops
public_router.include_router(metrics_router, tags=["metrics"])
