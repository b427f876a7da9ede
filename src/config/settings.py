"""
Rebalancer Settings — Конфигурация ребалансера

Источник: YAML файл (yaml.safe_load) + переопределения из окружения.
Порядок загрузки:
1. Чтение YAML
2. Валидация против контракта rebalance_config (jsonschema)
3. Переопределения из переменных окружения
4. Построение immutable RebalancerSettings (pydantic)

Любая ошибка на этих шагах → ConfigurationError до сетевых вызовов.
"""

import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Final, Mapping, Optional, Union

import yaml
from jsonschema import ValidationError as SchemaValidationError
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from src.core.contracts import validate_rebalance_config
from src.core.domain.position import Position, coerce_decimal
from src.core.errors import ConfigurationError
from src.venue.base import VenueAdapter
from src.venue.loader import load_adapter
from src.venue.paper import PaperVenueAdapter


# =============================================================================
# ПЕРЕМЕННЫЕ ОКРУЖЕНИЯ
# =============================================================================

ENV_LOG_LEVEL: Final[str] = "LP_REBALANCER_LOG_LEVEL"
ENV_DRY_RUN: Final[str] = "LP_REBALANCER_DRY_RUN"
ENV_INTERVAL_MINUTES: Final[str] = "LP_REBALANCER_INTERVAL_MINUTES"


# =============================================================================
# SETTINGS MODELS
# =============================================================================


class PaperSettings(BaseModel):
    """
    Начальное состояние paper venue.

    Если количества позиции не заданы, берутся целевые количества.
    """

    position_base: Optional[Decimal] = Field(None, ge=0)
    position_quote: Optional[Decimal] = Field(None, ge=0)
    price: Decimal = Field(Decimal("1"), gt=0, description="Цена 1 base в quote")
    fee_bps: Decimal = Field(Decimal("25"), ge=0, lt=10000, description="Комиссия swap (bps)")
    wallet_base: Decimal = Field(Decimal("0"), ge=0)
    wallet_quote: Decimal = Field(Decimal("0"), ge=0)

    model_config = {"frozen": True}

    @field_validator(
        "position_base",
        "position_quote",
        "price",
        "fee_bps",
        "wallet_base",
        "wallet_quote",
        mode="before",
    )
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        return coerce_decimal(v)


class RebalancerSettings(BaseModel):
    """Полная конфигурация ребалансера одной позиции."""

    # Позиция
    pool_id: str = Field(..., min_length=1)
    base_symbol: str = Field("SOL", min_length=1)
    quote_symbol: str = Field("TOKEN", min_length=1)
    target_base_amount: Decimal = Field(..., gt=0)
    target_quote_amount: Decimal = Field(..., gt=0)

    # Параметры ребалансировки
    tolerance: Decimal = Field(Decimal("0.10"), gt=0, le=1)
    interval_minutes: int = Field(60, ge=1)

    # Venue
    dry_run: bool = True
    adapter: Optional[str] = None
    adapter_options: Dict[str, Any] = Field(default_factory=dict)
    paper: PaperSettings = Field(default_factory=PaperSettings)

    # Логирование
    log_level: str = "INFO"
    log_file: Optional[str] = None

    model_config = {"frozen": True}

    @field_validator("target_base_amount", "target_quote_amount", "tolerance", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        return coerce_decimal(v)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @model_validator(mode="after")
    def require_adapter_for_live(self) -> "RebalancerSettings":
        if not self.dry_run and not self.adapter:
            raise ValueError("adapter is required when dry_run is false")
        return self

    def position(self) -> Position:
        """Целевая позиция из конфигурации."""
        return Position(
            pool_id=self.pool_id,
            base_symbol=self.base_symbol,
            quote_symbol=self.quote_symbol,
            target_base_amount=self.target_base_amount,
            target_quote_amount=self.target_quote_amount,
        )

    def build_adapter(self) -> VenueAdapter:
        """
        Venue adapter для этой конфигурации.

        dry_run → PaperVenueAdapter, иначе внешний адаптер по dotted path.
        """
        if self.dry_run:
            paper = self.paper
            return PaperVenueAdapter(
                pool_id=self.pool_id,
                position_base=(
                    paper.position_base
                    if paper.position_base is not None
                    else self.target_base_amount
                ),
                position_quote=(
                    paper.position_quote
                    if paper.position_quote is not None
                    else self.target_quote_amount
                ),
                price=paper.price,
                fee_bps=paper.fee_bps,
                wallet_base=paper.wallet_base,
                wallet_quote=paper.wallet_quote,
            )
        return load_adapter(self.adapter, self.adapter_options)


# =============================================================================
# ЗАГРУЗКА
# =============================================================================


def load_yaml_config(file_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Безопасная загрузка YAML файла конфигурации.

    Raises:
        ConfigurationError: Файл не найден, невалидный YAML или не mapping
    """
    try:
        with open(file_path, "r", encoding="utf-8") as file:
            data = yaml.safe_load(file)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Configuration file {file_path} not found.") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing YAML file {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {file_path} must contain a mapping")
    return data


def apply_env_overrides(data: Dict[str, Any], env: Mapping[str, str]) -> Dict[str, Any]:
    """
    Переопределение ключей конфигурации из окружения.

    Raises:
        ConfigurationError: Невалидное значение переменной окружения
    """
    result = dict(data)

    if env.get(ENV_LOG_LEVEL):
        result["log_level"] = env[ENV_LOG_LEVEL]

    if env.get(ENV_DRY_RUN):
        raw = env[ENV_DRY_RUN].strip().lower()
        if raw not in ("true", "false", "1", "0", "yes", "no"):
            raise ConfigurationError(f"{ENV_DRY_RUN} must be a boolean, got '{env[ENV_DRY_RUN]}'")
        result["dry_run"] = raw in ("true", "1", "yes")

    if env.get(ENV_INTERVAL_MINUTES):
        try:
            result["interval_minutes"] = int(env[ENV_INTERVAL_MINUTES])
        except ValueError as e:
            raise ConfigurationError(
                f"{ENV_INTERVAL_MINUTES} must be an integer, got '{env[ENV_INTERVAL_MINUTES]}'"
            ) from e

    return result


def build_settings(data: Dict[str, Any], env: Optional[Mapping[str, str]] = None) -> RebalancerSettings:
    """
    Построение настроек из словаря конфигурации.

    Args:
        data: Содержимое конфигурации (как из YAML)
        env: Окружение для переопределений (default: os.environ)

    Raises:
        ConfigurationError: Нарушение контракта или невалидные значения
    """
    try:
        validate_rebalance_config(data)
    except SchemaValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e.message}") from e

    merged = apply_env_overrides(data, os.environ if env is None else env)

    try:
        return RebalancerSettings(**merged)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def load_settings(
    file_path: Union[str, Path], env: Optional[Mapping[str, str]] = None
) -> RebalancerSettings:
    """Загрузка настроек из YAML файла с переопределениями из окружения."""
    return build_settings(load_yaml_config(file_path), env)
