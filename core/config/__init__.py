"""
Runtime Configuration Module

Provides configuration loading and management for tree construction.
"""

from .runtime import (
    COMBINE_ORDERS,
    LoggingConfig,
    MerkleConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "COMBINE_ORDERS",
    "LoggingConfig",
    "MerkleConfig",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
]
