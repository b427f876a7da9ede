"""Настройка логирования ребалансера (rich console + опциональный файл)."""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# RichHandler сам выводит время и уровень
CONSOLE_FORMAT = "%(message)s"

console = Console()


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Конфигурация root logger.

    Args:
        level: Уровень логирования (DEBUG/INFO/WARNING/ERROR/CRITICAL)
        log_file: Путь к файлу лога (каталог создаётся при необходимости)

    Returns:
        Logger пакета src
    """
    handlers: list = [RichHandler(console=console, rich_tracebacks=True)]
    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)

    # basicConfig назначает format только handlers без formatter
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=CONSOLE_FORMAT,
        handlers=handlers,
        force=True,
    )
    return logging.getLogger("src")
