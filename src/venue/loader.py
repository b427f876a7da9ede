"""Загрузка venue adapter по dotted path из конфигурации.

Формат: "package.module:ClassName". Реальные адаптеры (RPC, подпись
транзакций) живут вне этого пакета и подключаются через конфигурацию.
"""

import importlib
from typing import Any, Dict, Optional

from src.core.errors import ConfigurationError
from src.venue.base import VenueAdapter


def resolve_adapter_class(path: str) -> type:
    """
    Импорт класса адаптера по строке "module:ClassName".

    Raises:
        ConfigurationError: Неверный формат, модуль/класс не найден
            или класс не наследует VenueAdapter
    """
    module_name, sep, class_name = path.partition(":")
    if not sep or not module_name or not class_name:
        raise ConfigurationError(f"Adapter path must look like 'module:ClassName', got '{path}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import adapter module '{module_name}': {e}") from e

    adapter_class = getattr(module, class_name, None)
    if adapter_class is None:
        raise ConfigurationError(f"Adapter class '{class_name}' not found in '{module_name}'")
    if not isinstance(adapter_class, type) or not issubclass(adapter_class, VenueAdapter):
        raise ConfigurationError(f"'{path}' is not a VenueAdapter subclass")
    return adapter_class


def load_adapter(path: str, options: Optional[Dict[str, Any]] = None) -> VenueAdapter:
    """Создание адаптера с keyword-опциями из конфигурации."""
    adapter_class = resolve_adapter_class(path)
    try:
        return adapter_class(**(options or {}))
    except TypeError as e:
        raise ConfigurationError(f"Invalid options for adapter '{path}': {e}") from e
