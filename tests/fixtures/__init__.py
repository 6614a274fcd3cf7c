"""
Test fixtures package for the sparse Merkle tree core.

- common.py: entry/tree factories and the fixture-scenario constants
- reference_tree.py: in-memory tree implementing WitnessSource

Usage:
    from fixtures import make_entries, make_tree

    def test_something():
        tree = make_tree(make_entries(4))
        siblings = tree.siblings_for(tree_key)
"""

from .common import (
    REFERENCE_KEY,
    REFERENCE_VALUE,
    empty_siblings,
    make_entries,
    make_entry,
    make_tree,
    neighbour_key,
    toy_poseidon,
)
from .reference_tree import ReferenceTree

__all__ = [
    "REFERENCE_KEY",
    "REFERENCE_VALUE",
    "ReferenceTree",
    "empty_siblings",
    "make_entries",
    "make_entry",
    "make_tree",
    "neighbour_key",
    "toy_poseidon",
]
