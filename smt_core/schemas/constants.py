"""
Module 01 - Schemas & Constants
File: constants.py

Purpose: Centralize field, tree and schema constants.
This file must remain tiny and have no imports from other package modules
to avoid circular dependencies.
"""

# BN254 scalar field prime. Keys, values, sibling nodes and roots all live here.
FIELD_MODULUS: int = (
    21888242871839275222246405745257275088548364400416034343698204186575808495617
)

# Fixed tree depth: one path bit and one sibling slot per level.
TREE_DEPTH: int = 256

# Root of the tree holding no entries. Also the "no sibling" sentinel.
EMPTY_TREE_ROOT: int = 0

# Constant appended to leaf hash inputs: H(key, value, 1)
LEAF_DOMAIN_CONSTANT: int = 1

# Schema version carried by every serializable model
SCHEMA_VERSION: str = "v1"

SUPPORTED_SCHEMA_VERSIONS: frozenset[str] = frozenset({"v1"})
