# src/stakepool/api/__main__.py
from __future__ import annotations

import os

import uvicorn

from stakepool.env import load_dotenv_if_present


def main() -> None:
    # Load .env early so STAKEPOOL_* vars exist before anything reads them.
    load_dotenv_if_present()

    # Import after dotenv load (prevents "config read before env" surprises)
    from stakepool.api.app import create_app
    from stakepool.api.structured_logging import configure_structured_logging
    from stakepool.runtime.pool_config import load_pool_config

    cfg = load_pool_config()
    configure_structured_logging(os.getenv("STAKEPOOL_LOG_LEVEL") or cfg.log_level)

    host = os.getenv("STAKEPOOL_API_HOST", cfg.api_host)
    port = int(os.getenv("STAKEPOOL_API_PORT", str(cfg.api_port)))

    uvicorn.run(create_app(), host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
