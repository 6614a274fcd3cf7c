"""
Common test fixtures shared by all modules.

Provides factory functions for:
- Entries with deterministic keys/values
- Populated ReferenceTrees
- A toy n-ary "poseidon" function for hasher plumbing tests
- The reference entry used by the fixture scenario
"""

import hashlib
from typing import Optional, Sequence

from smt_core.crypto.hashing import FieldHasher
from smt_core.merkle.entry import Entry
from smt_core.schemas.constants import FIELD_MODULUS, TREE_DEPTH

from .reference_tree import ReferenceTree


# Entry from the published fixture scenario (its root is 3532809757...4128
# under circomlib Poseidon).
REFERENCE_KEY = 18746990989203767017840856832962652635369613415011636432610873672704085238844
REFERENCE_VALUE = 10223238458026721676606706894638558676629446348345239719814856822628482567791


def make_entry(seed: int, value: Optional[int] = None) -> Entry:
    """Deterministic entry: key and value derived from sha256 of the seed."""
    digest = hashlib.sha256(f"key-{seed}".encode()).digest()
    key = int.from_bytes(digest, "big") % FIELD_MODULUS
    if value is None:
        digest = hashlib.sha256(f"value-{seed}".encode()).digest()
        value = int.from_bytes(digest, "big") % FIELD_MODULUS
    return Entry(key, value)


def make_entries(count: int, start: int = 0) -> list[Entry]:
    return [make_entry(i) for i in range(start, start + count)]


def make_tree(
    entries: Sequence[Entry] = (),
    hasher: Optional[FieldHasher] = None,
) -> ReferenceTree:
    """ReferenceTree holding the given entries."""
    tree = ReferenceTree(hasher)
    for entry in entries:
        tree.insert(entry.key, entry.value)
    return tree


def empty_siblings() -> list[int]:
    return [0] * TREE_DEPTH


def toy_poseidon(inputs: Sequence[int]) -> int:
    """Stand-in n-ary field hash with the call shape of a Poseidon function."""
    acc = len(inputs)
    for x in inputs:
        acc = (acc * 1_000_003 + x * x * x * x * x + 7) % FIELD_MODULUS
    return acc


def neighbour_key(key: int, max_bit: int = 240) -> int:
    """
    A different key whose path agrees with `key` on every level from the
    root down to bit `b`, where b is the highest set bit of key <= max_bit.

    Clearing a set bit keeps the result inside the field. In a tree holding
    `key` and a few random keys, `key` is the matching entry for the result.
    """
    for b in range(max_bit, -1, -1):
        if (key >> b) & 1:
            return key ^ (1 << b)
    raise ValueError(f"key {key} has no set bit at or below {max_bit}")
