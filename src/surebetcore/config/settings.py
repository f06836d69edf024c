"""TOML config loading and profiles."""

from __future__ import annotations

import logging
import math
import tomllib
from pathlib import Path
from typing import Any

from surebetcore.errors import ConfigError

# Default config search path (project root or cwd)
_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent.parent / "config"
_CWD_CONFIG = Path.cwd() / "config"


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Override values take precedence."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _find_config_dir(config_dir: Path | None = None) -> Path:
    if config_dir is not None:
        return config_dir
    if _CWD_CONFIG.exists():
        return _CWD_CONFIG
    return _CONFIG_DIR


def load_config(profile: str | None = None, config_dir: Path | None = None) -> dict[str, Any]:
    """Load merged config from default.toml and optional profile overlay."""
    directory = _find_config_dir(config_dir)
    default_path = directory / "default.toml"
    if not default_path.exists():
        return {}
    base = _load_toml(default_path)
    if profile:
        profile_path = directory / f"{profile}.toml"
        if profile_path.exists():
            overlay = _load_toml(profile_path)
            base = _deep_merge(base, overlay)
    return base


def get_settings(profile: str | None = None, config_dir: Path | None = None) -> Settings:
    """Return Settings instance from merged config."""
    raw = load_config(profile, config_dir)
    return Settings.from_dict(raw)


class Settings:
    """Application settings from TOML config."""

    def __init__(
        self,
        *,
        consolidation: dict[str, Any] | None = None,
        ocr: dict[str, Any] | None = None,
        logging: dict[str, Any] | None = None,
    ):
        self.consolidation = consolidation or {}
        self.ocr = ocr or {}
        self.logging = logging or {}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Settings:
        return cls(
            consolidation=raw.get("consolidation"),
            ocr=raw.get("ocr"),
            logging=raw.get("logging"),
        )

    # Convenience accessors with defaults
    @property
    def consolidation_currency(self) -> str:
        return str(self.consolidation.get("currency", "BRL")).upper()

    @property
    def dust_threshold(self) -> float:
        return float(self.consolidation.get("dust_threshold", 0.01))

    @property
    def fallback_rates(self) -> dict[str, float]:
        raw = self.consolidation.get("fallback_rates") or {}
        rates: dict[str, float] = {}
        for currency, value in raw.items():
            try:
                rate = float(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"fallback rate for {currency} is not a number: {value!r}") from e
            if not math.isfinite(rate) or rate <= 0:
                raise ConfigError(f"fallback rate for {currency} must be positive, got {rate}")
            rates[str(currency).upper()] = rate
        rates["BRL"] = 1.0
        return rates

    @property
    def hidden_decimal_threshold(self) -> float:
        return float(self.ocr.get("hidden_decimal_threshold", 0.01))

    @property
    def logging_level(self) -> str:
        return self.logging.get("level", "INFO").upper()

    @property
    def logging_format(self) -> str:
        return self.logging.get("format", "console")

    @property
    def logging_level_num(self) -> int:
        return getattr(logging, self.logging_level, logging.INFO)


def configure_logging(settings: Settings) -> None:
    """Configure structlog with settings. Call once at application entry."""
    import structlog

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.logging_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.logging_level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
