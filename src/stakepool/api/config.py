import os
from dataclasses import dataclass


@dataclass(frozen=True)
class ApiConfig:
    mode: str  # "dev" | "testnet" | "prod"
    admin_token: str | None
    default_events_limit: int


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return int(default)
    try:
        return int(str(raw).strip())
    except ValueError:
        return int(default)


def load_api_config() -> ApiConfig:
    mode = os.getenv("STAKEPOOL_API_MODE", os.getenv("STAKEPOOL_MODE", "prod")).strip().lower()
    token = (os.getenv("STAKEPOOL_ADMIN_TOKEN") or "").strip() or None
    limit = max(_env_int("STAKEPOOL_EVENTS_LIMIT", 50), 1)
    return ApiConfig(mode=mode, admin_token=token, default_events_limit=limit)


def _is_truthy(v: str | None) -> bool:
    if v is None:
        return False
    return v.strip().lower() in {"1", "true", "yes", "y", "on"}


def docs_enabled(mode: str) -> bool:
    """OpenAPI docs are off in prod unless STAKEPOOL_API_DOCS forces them on."""
    env = os.getenv("STAKEPOOL_API_DOCS")
    if env is not None:
        return _is_truthy(env)
    return mode != "prod"
