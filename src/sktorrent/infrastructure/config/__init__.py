from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, SktorrentConfig, StremioConfig

__all__ = [
    "AppConfig",
    "EnvOverrides",
    "SktorrentConfig",
    "StremioConfig",
    "load_config",
]
