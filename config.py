# -*- coding: utf-8 -*-
"""
Settings from environment variables.
"""
import os

from nbu_fields import DEFAULT_BASE_URL


def _env(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    v = _env(name, str(default))
    try:
        return int(v)
    except ValueError:
        raise RuntimeError(f"Invalid integer in env {name}: {v!r}") from None


def get_config() -> dict:
    return {
        "base_url": _env("NBU_QR_BASE_URL", DEFAULT_BASE_URL),
        "scale": _env_int("NBU_QR_SCALE", 8),
        "border": _env_int("NBU_QR_BORDER", 4),
        "log_level": _env("NBU_QR_LOG_LEVEL", "WARNING").upper(),
    }
