"""
Runtime Configuration Module

Provides configuration loading for the sparse Merkle tree core.
"""

from .runtime import SmtConfig, get_default_verifier, setup_logging

__all__ = [
    "SmtConfig",
    "get_default_verifier",
    "setup_logging",
]
