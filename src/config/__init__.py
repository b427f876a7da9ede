"""Config — загрузка настроек ребалансера и настройка логирования."""

from .logging_setup import setup_logging
from .settings import (
    ENV_DRY_RUN,
    ENV_INTERVAL_MINUTES,
    ENV_LOG_LEVEL,
    PaperSettings,
    RebalancerSettings,
    apply_env_overrides,
    build_settings,
    load_settings,
    load_yaml_config,
)

__all__ = [
    "setup_logging",
    "ENV_DRY_RUN",
    "ENV_INTERVAL_MINUTES",
    "ENV_LOG_LEVEL",
    "PaperSettings",
    "RebalancerSettings",
    "apply_env_overrides",
    "build_settings",
    "load_settings",
    "load_yaml_config",
]
