from __future__ import annotations

from fastapi import FastAPI

from stakepool.api.config import docs_enabled, load_api_config
from stakepool.api.errors import install_error_handlers
from stakepool.api.routes_public import public_router
from stakepool.api.structured_logging import RequestLogMiddleware
from stakepool.runtime.pool_boot import build_pool as _build_pool
from stakepool.runtime.pool_config import load_pool_config


def build_pool(cfg=None):
    """Build the StakingPool served by the API.

    This wrapper exists so tests can monkeypatch `stakepool.api.app.build_pool`
    without reaching into runtime modules.
    """
    return _build_pool(cfg)


def create_app(*, boot_runtime: bool = True) -> FastAPI:
    """Create the FastAPI application.

    boot_runtime:
      - True (default): load pool config + attach a pool
      - False: no pool attached; tests attach their own to app.state.pool
    """
    cfg = load_api_config()

    if docs_enabled(cfg.mode):
        app = FastAPI(title="stakepool API")
    else:
        app = FastAPI(title="stakepool API", docs_url=None, redoc_url=None, openapi_url=None)

    app.state.cfg = cfg

    if boot_runtime:
        pool_cfg = load_pool_config()
        app.state.pool_cfg = pool_cfg
        app.state.pool = build_pool(pool_cfg)
    else:
        app.state.pool_cfg = None
        app.state.pool = None

    app.add_middleware(RequestLogMiddleware)
    install_error_handlers(app)

    app.include_router(public_router)

    return app
