# src/rice_planner/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No backend required at import time.
- Backward compatible: module-level constants are exported.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "RICE"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Remote scorer ----
    backend_base_url: str
    request_timeout_seconds: float
    local_fallback: bool

    # ---- Session / planning defaults ----
    default_username: Optional[str]
    sprint_capacity: float

    @property
    def offline_mode(self) -> bool:
        return not self.backend_base_url

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "rice-planner") or "rice-planner"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/rice_planner"))

        # Empty string explicitly switches to offline mode.
        backend_base_url = _env(_k("BACKEND_URL"), "http://localhost:8080").strip().rstrip("/")
        request_timeout_seconds = max(0.0, _env_float(_k("REQUEST_TIMEOUT_SECONDS"), 30.0))
        local_fallback = _env_bool(_k("LOCAL_FALLBACK"), False)

        default_username = (_first_env(_k("USERNAME"), default="") or "").strip() or None

        sprint_capacity = _env_float(_k("SPRINT_CAPACITY"), 40.0)
        if sprint_capacity <= 0:
            sprint_capacity = 40.0

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            backend_base_url=backend_base_url,
            request_timeout_seconds=request_timeout_seconds,
            local_fallback=local_fallback,
            default_username=default_username,
            sprint_capacity=sprint_capacity,
        )


SETTINGS = Settings.from_env()

# ---- Optional local overrides (never committed) ----
# Prefer .env; use config_local.py only for safe overrides.
try:
    import config_local as _config_local  # type: ignore

    if hasattr(_config_local, "BACKEND_URL"):
        object.__setattr__(SETTINGS, "backend_base_url", str(_config_local.BACKEND_URL).rstrip("/"))  # type: ignore[misc]
    if hasattr(_config_local, "LOCAL_FALLBACK"):
        object.__setattr__(SETTINGS, "local_fallback", bool(_config_local.LOCAL_FALLBACK))  # type: ignore[misc]
except Exception:
    pass


def get_settings() -> Settings:
    return SETTINGS


# --------------------------------------------------------------------------------------
# Backward-compatible exports (module-level constants).
# --------------------------------------------------------------------------------------

APP_NAME = SETTINGS.app_name
LOG_LEVEL = SETTINGS.log_level
DATA_DIR = SETTINGS.data_dir

BACKEND_URL = SETTINGS.backend_base_url
REQUEST_TIMEOUT_SECONDS = SETTINGS.request_timeout_seconds
LOCAL_FALLBACK = SETTINGS.local_fallback

SPRINT_CAPACITY = SETTINGS.sprint_capacity
