"""
CLI command modules.
"""

from merkle_cli.commands import build, prove, verify

__all__ = ["build", "prove", "verify"]
