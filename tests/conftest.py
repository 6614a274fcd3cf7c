"""
Pytest configuration and shared fixtures for sparse Merkle tree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import logging
import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")
_reference = importlib.import_module("fixtures.reference_tree")

make_entry = _common.make_entry
make_entries = _common.make_entries
make_tree = _common.make_tree
empty_siblings = _common.empty_siblings
ReferenceTree = _reference.ReferenceTree

from smt_core.crypto.hashing import PoseidonHasher, Sha256FieldHasher


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def hasher():
    """Default field hasher."""
    return Sha256FieldHasher()


@pytest.fixture
def toy_hasher():
    """PoseidonHasher wrapping the toy n-ary function."""
    return PoseidonHasher(_common.toy_poseidon)


@pytest.fixture
def entries():
    """Eight deterministic entries."""
    return make_entries(8)


@pytest.fixture
def tree(entries, hasher):
    """ReferenceTree holding the eight default entries."""
    return make_tree(entries, hasher)


@pytest.fixture
def zeros():
    """All-empty sibling path."""
    return empty_siblings()


@pytest.fixture(autouse=True)
def _clean_smt_env(monkeypatch):
    """Keep SMT_* variables from the developer's shell out of the tests."""
    for name in ("SMT_HASH_BACKEND", "SMT_STRICT_WITNESS", "SMT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_smt_log_level():
    """Undo log levels applied to the smt_core logger by a test."""
    package_logger = logging.getLogger("smt_core")
    level = package_logger.level
    yield
    package_logger.setLevel(level)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
