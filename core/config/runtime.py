"""
Runtime Configuration

Central configuration for tree construction defaults and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from core.schemas.errors import ConfigurationException

load_dotenv()


ENV_PREFIX = "MERKLE_"

COMBINE_ORDERS = ("sorted", "positional")


@dataclass
class MerkleConfig:
    """Defaults used by the tree builder and proof verifier."""
    hash_algorithm: str = "sha256"
    padding_block: str = "_"
    combine_order: str = "sorted"
    encoding: str = "utf-8"

    def validate(self) -> None:
        if self.combine_order not in COMBINE_ORDERS:
            raise ConfigurationException(
                f"combine_order must be one of {COMBINE_ORDERS}, got {self.combine_order!r}",
                field_path="merkle.combine_order",
            )
        if not self.padding_block:
            raise ConfigurationException(
                "padding_block must be a non-empty string",
                field_path="merkle.padding_block",
            )
        if not self.hash_algorithm:
            raise ConfigurationException(
                "hash_algorithm must be set",
                field_path="merkle.hash_algorithm",
            )


@dataclass
class LoggingConfig:
    """Configuration for log output."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    merkle: MerkleConfig = field(default_factory=MerkleConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - MERKLE_HASH_ALGORITHM: hashlib algorithm name
        - MERKLE_PADDING_BLOCK: sentinel block appended to reach a power of two
        - MERKLE_COMBINE_ORDER: "sorted" or "positional"
        - MERKLE_ENCODING: text encoding for str blocks
        - MERKLE_LOG_LEVEL: log level
        - MERKLE_LOG_FILE: optional log file path
        """
        overrides: dict[str, Any] = {}

        for key in ("hash_algorithm", "padding_block", "combine_order", "encoding"):
            value = os.getenv(f"{ENV_PREFIX}{key.upper()}")
            if value:
                overrides.setdefault("merkle", {})[key] = value

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigurationException(f"Config file must contain a mapping: {path}")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        merkle_data = data.get("merkle", {}) or {}
        logging_data = data.get("logging", {}) or {}

        try:
            merkle = MerkleConfig(**merkle_data)
            log_conf = LoggingConfig(**logging_data)
        except TypeError as e:
            raise ConfigurationException(f"Unknown configuration key: {e}") from e

        merkle.validate()
        return cls(merkle=merkle, logging=log_conf, extra=data.get("extra", {}) or {})

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for key, value in overrides.get("merkle", {}).items():
            setattr(new_config.merkle, key, value)
        for key, value in overrides.get("logging", {}).items():
            setattr(new_config.logging, key, value)

        new_config.merkle.validate()
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "merkle": {
                "hash_algorithm": self.merkle.hash_algorithm,
                "padding_block": self.merkle.padding_block,
                "combine_order": self.merkle.combine_order,
                "encoding": self.merkle.encoding,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set the default runtime configuration (None resets to env-derived defaults)."""
    global _default_config
    _default_config = config
