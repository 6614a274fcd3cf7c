"""
Module 03 - Root Calculators
Recompute tree roots from one entry and its sibling path.

Owner: Protocol/Crypto Engineer
Module ID: M03

This module provides:
- fold: one ordered hashing step between a running node and a sibling
- calculate_root: root of the tree containing an entry
- calculate_two_roots: roots with and without an entry, in a single pass

Sparse Sibling Rules (Hard Contracts):
1. A sibling of 0 means the level has no branch; it contributes no hash.
2. path[i] == 0: node = H(node, sibling); path[i] == 1: node = H(sibling, node)
3. All-zero siblings: the root is the bare leaf hash (single-entry tree).
4. Removing an entry collapses the first real branch above it: the first
   non-zero sibling becomes the running node of the entry-less tree as-is.
"""
from __future__ import annotations

from typing import Optional, Sequence

from smt_core.crypto.hashing import DEFAULT_HASHER, FieldHasher
from smt_core.merkle.entry import EntryLike, as_entry
from smt_core.merkle.paths import Path, key_to_path
from smt_core.merkle.witness import normalize_siblings
from smt_core.schemas.constants import EMPTY_TREE_ROOT, TREE_DEPTH
from smt_core.schemas.errors import WitnessShapeException


def fold(node: int, sibling: int, bit: int, hasher: FieldHasher) -> int:
    """
    Combine a running node with its sibling at one level.

    Args:
        node: Running node value
        sibling: Non-zero sibling at this level
        bit: Path bit for this level (0: node is left, 1: node is right)
        hasher: Field hasher

    Returns:
        Parent node value
    """
    if bit == 0:
        return hasher.hash(node, sibling, False)
    return hasher.hash(sibling, node, False)


def calculate_root(
    entry: EntryLike,
    siblings: Sequence[int],
    path: Optional[Path] = None,
    hasher: Optional[FieldHasher] = None,
) -> int:
    """
    Compute the root of a tree containing `entry` at `path`.

    `path` defaults to the entry's own key path. Non-membership checks
    pass a different key's path to position the matching entry along it.

    Args:
        entry: (key, value) leaf
        siblings: TREE_DEPTH sibling nodes, leaf level first
        path: Branch decisions to follow (defaults to key_to_path(entry.key))
        hasher: Field hasher (defaults to DEFAULT_HASHER)

    Returns:
        Root field element

    Raises:
        WitnessShapeException: If siblings or path are malformed
    """
    if hasher is None:
        hasher = DEFAULT_HASHER
    entry = as_entry(entry)
    siblings = normalize_siblings(siblings)
    if path is None:
        path = key_to_path(entry.key)
    elif len(path) != TREE_DEPTH:
        raise WitnessShapeException(
            f"Path must have {TREE_DEPTH} bits, got {len(path)}",
            length=len(path),
        )

    node = hasher.hash(entry.key, entry.value, True)
    for i, sibling in enumerate(siblings):
        if sibling != 0:
            node = fold(node, sibling, path[i], hasher)
    return node


def calculate_two_roots(
    entry: EntryLike,
    siblings: Sequence[int],
    hasher: Optional[FieldHasher] = None,
) -> tuple[int, int]:
    """
    Compute the roots of the tree without and with `entry`.

    Both accumulators walk the same levels in one pass. The entry-less
    accumulator stays unset (0) until the first non-zero sibling, takes
    that sibling as its value without hashing, and from then on folds like
    the other one. The fold is skipped whenever the accumulator equals the
    sibling at hand, which is always the case on the level it was set.

    Args:
        entry: (key, value) leaf
        siblings: TREE_DEPTH sibling nodes for entry.key, leaf level first
        hasher: Field hasher (defaults to DEFAULT_HASHER)

    Returns:
        (without_root, with_root). without_root is 0 when every sibling is
        0, i.e. the entry is the only one in the tree.
    """
    if hasher is None:
        hasher = DEFAULT_HASHER
    entry = as_entry(entry)
    siblings = normalize_siblings(siblings)
    path = key_to_path(entry.key)

    with_node = hasher.hash(entry.key, entry.value, True)
    without_node = EMPTY_TREE_ROOT
    for i, sibling in enumerate(siblings):
        if sibling == 0:
            continue
        if without_node == EMPTY_TREE_ROOT:
            without_node = sibling
        with_node = fold(with_node, sibling, path[i], hasher)
        if without_node != sibling:
            without_node = fold(without_node, sibling, path[i], hasher)
    return without_node, with_node


__all__ = [
    "fold",
    "calculate_root",
    "calculate_two_roots",
]
