"""
Neumark configuration.

Configuration only governs ambient behaviour (logging, output rendering)
and the series termination guard. Curve constants are fixed and are not
configurable.

Configuration Hierarchy (highest to lowest priority):
1. Environment variables (NEUMARK_<SECTION>_<FIELD>)
2. Config file (JSON, TOML or YAML)
3. Default values

Example:
    config = NeumarkConfig.load("neumark.toml")
    config.curve.max_series_pairs

    # NEUMARK_OUTPUT_UNITS=whole overrides the file
"""

from __future__ import annotations

import json
import logging
import os
import tomllib
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .curve.constants import MAX_SERIES_PAIRS
from .logging import LoggingOptions

logger = logging.getLogger(__name__)

# NEUMARK_LOG_* belongs to neumark.logging.load_logging_options_from_env
_RESERVED_ENV_SECTIONS = {"log"}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# =============================================================================
# Configuration Sections
# =============================================================================

@dataclass
class CurveConfig:
    """Curve evaluation settings."""
    max_series_pairs: int = MAX_SERIES_PAIRS
    trace: bool = False

    def __post_init__(self):
        self.trace = bool(self.trace)
        if not isinstance(self.max_series_pairs, int) or isinstance(self.max_series_pairs, bool):
            raise ValueError("max_series_pairs must be an integer")
        if not (0 < self.max_series_pairs <= MAX_SERIES_PAIRS):
            raise ValueError(f"max_series_pairs must be in (0, {MAX_SERIES_PAIRS}]")


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "text"  # "json" or "text"
    file: Optional[str] = None

    def to_options(self) -> LoggingOptions:
        return LoggingOptions(
            level=self.level,
            format=self.format,
            file=self.file,
        )


@dataclass
class OutputConfig:
    """CLI output rendering."""
    units: str = "ulps"  # "ulps" or "whole"
    indent: int = 2


# =============================================================================
# Main Configuration
# =============================================================================

_SECTIONS = {
    "curve": CurveConfig,
    "logging": LoggingConfig,
    "output": OutputConfig,
}


@dataclass
class NeumarkConfig:
    """Top-level configuration combining all sections."""
    curve: CurveConfig = field(default_factory=CurveConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def load(
        cls,
        config_file: Optional[Union[str, Path]] = None,
        env_prefix: str = "NEUMARK",
    ) -> "NeumarkConfig":
        """
        Load configuration with hierarchy: env vars > config file > defaults.

        Args:
            config_file: Path to config file (JSON, TOML or YAML)
            env_prefix: Prefix for environment variables

        Returns:
            Loaded and validated configuration
        """
        config_dict: Dict[str, Any] = {}
        if config_file:
            config_dict = cls._load_file(Path(config_file))
        config_dict = cls._apply_env_overrides(config_dict, env_prefix)
        config = cls._from_dict(config_dict)
        config.validate()
        return config

    @classmethod
    def _load_file(cls, path: Path) -> Dict[str, Any]:
        """Load configuration from file."""
        if not path.exists():
            logger.warning("Config file not found: %s", path)
            return {}

        content = path.read_text(encoding="utf-8")
        if path.suffix == ".json":
            parsed = json.loads(content)
        elif path.suffix == ".toml":
            parsed = tomllib.loads(content)
        elif path.suffix in {".yaml", ".yml"}:
            parsed = yaml.safe_load(content)
        else:
            logger.warning("Unknown config file format: %s", path.suffix)
            return {}

        if not isinstance(parsed, dict):
            raise ValueError(f"Config file {path} must contain a mapping at top level")
        return parsed

    @classmethod
    def _apply_env_overrides(cls, config: Dict[str, Any], prefix: str) -> Dict[str, Any]:
        """Apply environment variable overrides."""
        for key, value in os.environ.items():
            if not key.startswith(f"{prefix}_"):
                continue

            # NEUMARK_CURVE_MAX_SERIES_PAIRS -> curve.max_series_pairs
            parts = key[len(prefix) + 1:].lower().split("_")
            if len(parts) < 2 or parts[0] in _RESERVED_ENV_SECTIONS:
                continue

            section = parts[0]
            field_name = "_".join(parts[1:])
            config.setdefault(section, {})[field_name] = cls._parse_env_value(value)

        return config

    @staticmethod
    def _parse_env_value(value: str) -> Any:
        """Parse environment variable value to appropriate type."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    @classmethod
    def _from_dict(cls, config_dict: Dict[str, Any]) -> "NeumarkConfig":
        """Build config object from dictionary."""
        sections: Dict[str, Any] = {}
        for name, section_cls in _SECTIONS.items():
            values = config_dict.get(name) or {}
            known = {f.name for f in fields(section_cls)}
            unknown = sorted(set(values) - known)
            if unknown:
                raise ValueError(f"Unknown {name} config keys: {', '.join(unknown)}")
            sections[name] = section_cls(**values)
        return cls(**sections)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def validate(self) -> None:
        """Validate cross-field settings; section-local checks run in __post_init__."""
        if self.logging.level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Invalid logging level: {self.logging.level}")

        if self.logging.format not in ("json", "text"):
            raise ValueError(f"Invalid logging format: {self.logging.format}")

        if self.output.units not in ("ulps", "whole"):
            raise ValueError(f"Invalid output units: {self.output.units}")

        if self.output.indent < 0:
            raise ValueError("output indent must be non-negative")


# =============================================================================
# Global Config Instance
# =============================================================================

_global_config: Optional[NeumarkConfig] = None


def get_config() -> NeumarkConfig:
    """Get global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = NeumarkConfig.load()
    return _global_config


def set_config(config: NeumarkConfig) -> None:
    """Set global configuration instance."""
    global _global_config
    _global_config = config


def reset_config() -> None:
    """Reset global configuration to None (forces reload)."""
    global _global_config
    _global_config = None
