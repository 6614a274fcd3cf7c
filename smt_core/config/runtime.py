"""
Runtime Configuration

Central configuration for hash backend selection, witness policy and logging.
"""

from __future__ import annotations

import copy
import logging
import os
import sys
from dataclasses import dataclass
from typing import Any

from dotenv import load_dotenv

from smt_core.crypto.hashing import FieldHasher, load_hasher
from smt_core.merkle.operations import SparseMerkleVerifier

load_dotenv()


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Parent of every module logger in the package.
PACKAGE_LOGGER = "smt_core"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _log_level(name: str) -> int:
    return getattr(logging, name.upper(), logging.WARNING)


@dataclass
class SmtConfig:
    """
    Runtime configuration for the sparse Merkle tree core.

    Can be loaded from:
    - Environment variables (and a .env file via python-dotenv)
    - A plain dictionary
    - Programmatic construction
    """
    hash_backend: str = "sha256"
    strict_witness: bool = True
    log_level: str = "WARNING"

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - SMT_HASH_BACKEND: sha256 | poseidon | module:callable
        - SMT_STRICT_WITNESS: Reject sibling paths shorter than the tree depth (true/false)
        - SMT_LOG_LEVEL: Log level name
        """
        overrides: dict[str, Any] = {}

        if os.getenv("SMT_HASH_BACKEND"):
            overrides["hash_backend"] = os.getenv("SMT_HASH_BACKEND")
        if os.getenv("SMT_STRICT_WITNESS"):
            overrides["strict_witness"] = _env_bool(os.getenv("SMT_STRICT_WITNESS", "true"))
        if os.getenv("SMT_LOG_LEVEL"):
            overrides["log_level"] = os.getenv("SMT_LOG_LEVEL")

        return overrides

    @classmethod
    def from_env(cls) -> "SmtConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SmtConfig":
        """Load configuration from a dictionary (supports partial data)."""
        strict = data.get("strict_witness", True)
        if isinstance(strict, str):
            strict = _env_bool(strict)
        return cls(
            hash_backend=data.get("hash_backend", "sha256"),
            strict_witness=bool(strict),
            log_level=data.get("log_level", "WARNING"),
        )

    def with_env_overrides(self) -> "SmtConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a dict first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for key, value in overrides.items():
            setattr(new_config, key, value)
        return new_config

    def hasher(self) -> FieldHasher:
        """Resolve the configured hash backend."""
        return load_hasher(self.hash_backend)

    def configure_logging(self) -> None:
        """Apply log_level to the smt_core loggers. Handlers are left alone."""
        logging.getLogger(PACKAGE_LOGGER).setLevel(_log_level(self.log_level))

    def to_dict(self) -> dict[str, Any]:
        return {
            "hash_backend": self.hash_backend,
            "strict_witness": self.strict_witness,
            "log_level": self.log_level,
        }


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure logging for applications embedding the core."""
    log_level = _log_level(level)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
    )


def get_default_verifier(config: SmtConfig | None = None) -> SparseMerkleVerifier:
    """
    Build a SparseMerkleVerifier from config (environment by default).

    The config's log_level is applied to the smt_core loggers.
    """
    if config is None:
        config = SmtConfig.from_env()
    config.configure_logging()
    return SparseMerkleVerifier.from_config(config)
