"""
Module 03 - Key Paths
Deterministic key -> branch-decision derivation.

Owner: Protocol/Crypto Engineer
Module ID: M03

Path Convention (Hard Contract):
- key_to_path(key) is the big-endian bit decomposition of the key into
  exactly TREE_DEPTH bits, most significant bit at index 0.
- Path index i pairs with sibling index i. Sibling index 0 is the level
  just above the leaf, so the lowest level branches on the key's MSB and
  the level nearest the root branches on its LSB.
- Bit 0 means the running node is the left child, bit 1 the right child.

Any implementation sharing roots with this one must keep this pairing
bit-for-bit.
"""
from __future__ import annotations

from smt_core.crypto.hashing import ensure_field_element
from smt_core.schemas.constants import TREE_DEPTH


Path = tuple[int, ...]


def key_to_path(key: int) -> Path:
    """
    Derive the branch decisions for a key.

    Args:
        key: Field element

    Returns:
        Tuple of TREE_DEPTH bits, MSB first

    Raises:
        FieldElementException: If key is not a field element

    Example:
        >>> key_to_path(1)[-1], key_to_path(1)[0]
        (1, 0)
    """
    ensure_field_element(key, "key")
    return tuple((key >> (TREE_DEPTH - 1 - i)) & 1 for i in range(TREE_DEPTH))


def common_prefix_length(key_a: int, key_b: int) -> int:
    """
    Number of leading path bits two keys share.

    Returns TREE_DEPTH when the keys are equal.
    """
    ensure_field_element(key_a, "key_a")
    ensure_field_element(key_b, "key_b")
    diff = key_a ^ key_b
    if diff == 0:
        return TREE_DEPTH
    return TREE_DEPTH - diff.bit_length()


__all__ = [
    "Path",
    "TREE_DEPTH",
    "key_to_path",
    "common_prefix_length",
]
