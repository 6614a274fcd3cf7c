"""
In-memory sparse Merkle tree used to generate witnesses for tests.

The library never builds trees; this stands in for the external
storage/proof-generation service and implements WitnessSource.

Node rules match the sibling-skipping fold:
- empty subtree -> 0
- subtree holding one entry -> that entry's leaf hash, at any height
- otherwise H(left, right), unless one side is empty, in which case the
  node is the non-empty side unchanged
The root splits on path index 255 (the key's LSB), the level above a leaf
on path index 0 (the key's MSB).
"""

from typing import Optional

from smt_core.crypto.hashing import DEFAULT_HASHER, FieldHasher
from smt_core.merkle.paths import key_to_path
from smt_core.schemas.constants import TREE_DEPTH


def _bit(key: int, level: int) -> int:
    """Path bit of key at level (same as key_to_path(key)[level])."""
    return (key >> (TREE_DEPTH - 1 - level)) & 1


class ReferenceTree:
    """Dictionary-backed tree that can produce sibling paths and roots."""

    def __init__(self, hasher: Optional[FieldHasher] = None) -> None:
        self.hasher = hasher if hasher is not None else DEFAULT_HASHER
        self.entries: dict[int, int] = {}

    def copy(self) -> "ReferenceTree":
        clone = ReferenceTree(self.hasher)
        clone.entries = dict(self.entries)
        return clone

    def insert(self, key: int, value: int) -> None:
        assert key not in self.entries, f"key {key} already present"
        self.entries[key] = value

    def remove(self, key: int) -> None:
        del self.entries[key]

    def set(self, key: int, value: int) -> None:
        assert key in self.entries, f"key {key} not present"
        self.entries[key] = value

    @property
    def root(self) -> int:
        return self._node(list(self.entries), TREE_DEPTH)

    def _node(self, keys: list[int], height: int) -> int:
        """Node for keys that agree on every path index >= height."""
        if not keys:
            return 0
        if len(keys) == 1:
            key = keys[0]
            return self.hasher.hash(key, self.entries[key], True)
        level = height - 1
        left = [k for k in keys if _bit(k, level) == 0]
        right = [k for k in keys if _bit(k, level) == 1]
        left_node = self._node(left, level)
        right_node = self._node(right, level)
        if left_node == 0:
            return right_node
        if right_node == 0:
            return left_node
        return self.hasher.hash(left_node, right_node, False)

    def _walk(self, key: int) -> tuple[list[int], list[int]]:
        """Siblings along key's path and the keys left on its side at the end."""
        path = key_to_path(key)
        siblings = [0] * TREE_DEPTH
        current = list(self.entries)
        level = TREE_DEPTH
        while level > 0 and len(current) > 1:
            level -= 1
            same = [k for k in current if _bit(k, level) == path[level]]
            other = [k for k in current if _bit(k, level) != path[level]]
            siblings[level] = self._node(other, level)
            current = same
        return siblings, current

    def siblings_for(self, key: int) -> list[int]:
        siblings, _ = self._walk(key)
        return siblings

    def matching_entry_for(self, key: int) -> Optional[tuple[int, int]]:
        if key in self.entries:
            return None
        _, remaining = self._walk(key)
        if not remaining:
            return None
        other = remaining[0]
        return (other, self.entries[other])
