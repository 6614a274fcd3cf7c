"""
Modules 03/04 - Sparse Merkle Tree Proofs and Updates
Stateless membership/non-membership verification and root updates for a
fixed-depth (256) sparse Merkle tree.

Owner: Protocol/Crypto Engineer
Module IDs: M03, M04

This module provides:
- Entry: (key, value) leaf
- key_to_path: key -> 256 branch decisions (MSB first)
- calculate_root / calculate_two_roots: root recomputation from a sibling path
- verify / add / delete / update: root-checked operations
- SparseMerkleVerifier: the same operations bound to one hasher
- WitnessSource: interface of the external tree-storage collaborator

Canonical Commitment Rules:
1. Leaf hashing: H(key, value, 1)
2. Parent hashing: H(left, right), ordered by the path bit of that level
3. Siblings are leaf-first; 0 means "no sibling" and is skipped
4. Empty tree: root 0
5. Single entry: root = leaf hash

Usage:
    from smt_core.merkle import Entry, add, verify, delete

    root = add(Entry(1, 10), 0, [0] * 256)
    verify(Entry(1, 10), None, [0] * 256, root)
    assert delete(Entry(1, 10), root, [0] * 256) == 0
"""
from .entry import Entry, EntryLike, as_entry
from .paths import Path, TREE_DEPTH, common_prefix_length, key_to_path
from .roots import calculate_root, calculate_two_roots, fold
from .witness import (
    Siblings,
    WitnessSource,
    normalize_matching_entry,
    normalize_siblings,
)
from .operations import (
    Operation,
    SparseMerkleVerifier,
    add,
    delete,
    is_member,
    is_non_member,
    prove_with,
    update,
    verify,
    verify_proof,
)


__all__ = [
    # Core types
    "Entry",
    "EntryLike",
    "Path",
    "Siblings",
    "TREE_DEPTH",
    "WitnessSource",
    # Paths and roots
    "as_entry",
    "key_to_path",
    "common_prefix_length",
    "fold",
    "calculate_root",
    "calculate_two_roots",
    "normalize_siblings",
    "normalize_matching_entry",
    # Operations
    "Operation",
    "verify",
    "add",
    "delete",
    "update",
    "is_member",
    "is_non_member",
    "verify_proof",
    "prove_with",
    # Convenience class
    "SparseMerkleVerifier",
]
