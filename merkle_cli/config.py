"""
CLI Configuration

Locates and loads the YAML configuration file, then applies environment
variable overrides and command-line flags on top.
"""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path

from core.config.runtime import RuntimeConfig


DEFAULT_CONFIG_PATHS = (
    Path("merkle.yaml"),
    Path(".merkle.yaml"),
    Path.home() / ".config" / "merkle" / "config.yaml",
)


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings. When no path is given
    the first existing default location is used.

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
    """
    config = RuntimeConfig()

    if config_path is not None:
        config = RuntimeConfig.from_yaml(config_path)
    else:
        for default_path in DEFAULT_CONFIG_PATHS:
            if default_path.exists():
                config = RuntimeConfig.from_yaml(default_path)
                break

    return config.with_env_overrides()


def apply_cli_overrides(config: RuntimeConfig, args: Namespace) -> RuntimeConfig:
    """Overlay --hash, --padding, --combine-order and --log-level flags."""
    if getattr(args, "hash", None):
        config.merkle.hash_algorithm = args.hash
    if getattr(args, "padding", None) is not None:
        config.merkle.padding_block = args.padding
    if getattr(args, "combine_order", None):
        config.merkle.combine_order = args.combine_order
    if getattr(args, "log_level", None):
        config.logging.level = args.log_level
    config.merkle.validate()
    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """# Merkle CLI configuration
merkle:
  hash_algorithm: sha256
  padding_block: "_"
  combine_order: sorted   # sorted | positional
  encoding: utf-8

logging:
  level: INFO
  file: null
"""
