"""
Module 04 - Sparse Merkle Tree Operations
Verify, add, delete and update against a root using one sibling path.

Owner: Protocol/Crypto Engineer
Module ID: M04

Each operation is a single-shot, stateless check: it recomputes the
relevant root(s) from the caller's witness, raises RootMismatchException
if the expected root disagrees, and (for add/delete/update) returns the
new root. Nothing is stored and nothing is retried.

Caller Contracts (NOT checked here):
1. add: `siblings` must be a witness that new_entry.key was absent. Passing
   the membership path of a present key yields a wrong root without error.
2. verify (non-membership): matching_entry.key must differ from entry.key.
   Passing the queried entry as its own matching entry validates.
Both are the witness producer's responsibility.
"""
from __future__ import annotations

import logging
from typing import Literal, Optional, Sequence

from smt_core.crypto.hashing import DEFAULT_HASHER, FieldHasher, ensure_field_element
from smt_core.merkle.entry import Entry, EntryLike, as_entry
from smt_core.merkle.paths import key_to_path
from smt_core.merkle.roots import calculate_root, calculate_two_roots, fold
from smt_core.merkle.witness import (
    WitnessSource,
    normalize_matching_entry,
    normalize_siblings,
)
from smt_core.schemas.constants import EMPTY_TREE_ROOT
from smt_core.schemas.errors import RootMismatchException
from smt_core.schemas.proof import SmtProof, UpdateReceipt

logger = logging.getLogger(__name__)


Operation = Literal["add", "delete", "update"]


def _check_root(operation: str, expected: int, computed: int) -> None:
    if computed != expected:
        logger.warning(
            f"{operation}: root mismatch (expected {expected:#x}, computed {computed:#x})"
        )
        raise RootMismatchException(
            f"{operation}: recomputed root does not match the expected root",
            operation=operation,
            expected=expected,
            computed=computed,
        )


def verify(
    entry: EntryLike,
    matching_entry: Optional[EntryLike],
    siblings: Sequence[int],
    root: int,
    hasher: Optional[FieldHasher] = None,
) -> None:
    """
    Check a membership or non-membership claim against a root.

    Membership (matching_entry is None or (0, 0)): the root recomputed from
    `entry` along its own path must equal `root`.

    Non-membership: the root recomputed from `matching_entry` along
    `entry`'s path must equal `root`. This only works if the matching
    entry sits on entry's path, which rules out a leaf for entry.key.

    Args:
        entry: (key, value) being proven; value unused for non-membership
        matching_entry: Existing leaf on entry's path, or None
        siblings: TREE_DEPTH sibling nodes, leaf level first
        root: Expected root
        hasher: Field hasher (defaults to DEFAULT_HASHER)

    Raises:
        RootMismatchException: If the recomputed root differs from `root`
    """
    entry = as_entry(entry)
    ensure_field_element(root, "root")
    matching = normalize_matching_entry(matching_entry)

    if matching is None:
        computed = calculate_root(entry, siblings, hasher=hasher)
        mode = "membership"
    else:
        computed = calculate_root(matching, siblings, key_to_path(entry.key), hasher)
        mode = "non-membership"

    logger.debug(f"verify ({mode}) key={entry.key:#x} computed={computed:#x}")
    _check_root("verify", root, computed)


def add(
    new_entry: EntryLike,
    old_root: int,
    siblings: Sequence[int],
    hasher: Optional[FieldHasher] = None,
) -> int:
    """
    Insert an entry and return the new root.

    An empty tree (old_root == 0) becomes the bare leaf hash; `siblings`
    is only shape-checked in that case. Otherwise the entry-less root
    computed from `siblings` must equal `old_root`.

    `siblings` is the path new_entry will have once inserted. Whether the
    key really was absent is not checked (see module notes).

    Raises:
        RootMismatchException: If the entry-less root differs from old_root
    """
    if hasher is None:
        hasher = DEFAULT_HASHER
    new_entry = as_entry(new_entry)
    ensure_field_element(old_root, "old_root")

    if old_root == EMPTY_TREE_ROOT:
        normalize_siblings(siblings)
        new_root = hasher.hash(new_entry.key, new_entry.value, True)
        logger.debug(f"add key={new_entry.key:#x} into empty tree -> {new_root:#x}")
        return new_root

    without_root, with_root = calculate_two_roots(new_entry, siblings, hasher)
    _check_root("add", old_root, without_root)
    logger.debug(f"add key={new_entry.key:#x} {old_root:#x} -> {with_root:#x}")
    return with_root


def delete(
    entry: EntryLike,
    old_root: int,
    siblings: Sequence[int],
    hasher: Optional[FieldHasher] = None,
) -> int:
    """
    Remove an entry and return the new root.

    The root with the entry must equal `old_root`. Deleting the only entry
    returns 0 (empty tree).

    Raises:
        RootMismatchException: If the tree under old_root does not hold entry
    """
    entry = as_entry(entry)
    ensure_field_element(old_root, "old_root")

    without_root, with_root = calculate_two_roots(entry, siblings, hasher)
    _check_root("delete", old_root, with_root)
    logger.debug(f"delete key={entry.key:#x} {old_root:#x} -> {without_root:#x}")
    return without_root


def update(
    new_value: int,
    old_entry: EntryLike,
    old_root: int,
    siblings: Sequence[int],
    hasher: Optional[FieldHasher] = None,
) -> int:
    """
    Replace the value stored at old_entry.key and return the new root.

    The key, and therefore the path, does not change. Old and new leaf
    hashes are folded in lockstep over the same siblings.

    Raises:
        RootMismatchException: If the tree under old_root does not hold old_entry
    """
    if hasher is None:
        hasher = DEFAULT_HASHER
    old_entry = as_entry(old_entry)
    ensure_field_element(new_value, "new_value")
    ensure_field_element(old_root, "old_root")
    siblings = normalize_siblings(siblings)

    path = key_to_path(old_entry.key)
    old_node = hasher.hash(old_entry.key, old_entry.value, True)
    new_node = hasher.hash(old_entry.key, new_value, True)
    for i, sibling in enumerate(siblings):
        if sibling != 0:
            old_node = fold(old_node, sibling, path[i], hasher)
            new_node = fold(new_node, sibling, path[i], hasher)

    _check_root("update", old_root, old_node)
    logger.debug(f"update key={old_entry.key:#x} {old_root:#x} -> {new_node:#x}")
    return new_node


# =============================================================================
# Boolean helpers
# =============================================================================


def is_member(
    entry: EntryLike,
    siblings: Sequence[int],
    root: int,
    hasher: Optional[FieldHasher] = None,
) -> bool:
    """Membership check returning False instead of raising on mismatch."""
    try:
        verify(entry, None, siblings, root, hasher)
    except RootMismatchException:
        return False
    return True


def is_non_member(
    key: int,
    matching_entry: EntryLike,
    siblings: Sequence[int],
    root: int,
    hasher: Optional[FieldHasher] = None,
) -> bool:
    """
    Non-membership check returning False instead of raising on mismatch.

    A missing matching entry cannot prove absence here; it returns False.
    """
    if normalize_matching_entry(matching_entry) is None:
        return False
    try:
        verify(Entry(key, 0), matching_entry, siblings, root, hasher)
    except RootMismatchException:
        return False
    return True


def verify_proof(proof: SmtProof, hasher: Optional[FieldHasher] = None) -> bool:
    """
    Verify an SmtProof.

    Args:
        proof: Proof to check
        hasher: Field hasher (defaults to DEFAULT_HASHER)

    Returns:
        True if the proof holds for proof.root, False otherwise
    """
    try:
        verify(proof.entry, proof.matching_entry, proof.siblings, proof.root, hasher)
    except RootMismatchException:
        return False
    return True


def prove_with(
    source: WitnessSource,
    entry: EntryLike,
    root: int,
    hasher: Optional[FieldHasher] = None,
    *,
    strict: bool = True,
) -> SmtProof:
    """
    Fetch a witness for entry.key from `source` and verify it against `root`.

    The sibling path is normalized before the proof is built, so with
    strict=False a trimmed path from the source is padded to TREE_DEPTH.

    Returns:
        The verified SmtProof (membership or non-membership)

    Raises:
        WitnessShapeException: If the source's sibling path is malformed
        FieldElementException: If the root or matching entry is not in the field
        RootMismatchException: If the witness does not hold for `root`
    """
    entry = as_entry(entry)
    ensure_field_element(root, "root")
    siblings = normalize_siblings(source.siblings_for(entry.key), strict=strict)
    matching = normalize_matching_entry(source.matching_entry_for(entry.key))

    verify(entry, matching, siblings, root, hasher)
    return SmtProof(
        entry=entry.as_tuple(),
        matching_entry=matching.as_tuple() if matching is not None else None,
        siblings=list(siblings),
        root=root,
        membership=matching is None,
    )


# =============================================================================
# Convenience class
# =============================================================================


class SparseMerkleVerifier:
    """
    Operations bound to one hash backend and witness policy.

    Example:
        >>> verifier = SparseMerkleVerifier()
        >>> root = verifier.add((1, 2), 0, [0] * 256)
        >>> verifier.verify((1, 2), None, [0] * 256, root)
    """

    def __init__(
        self,
        hasher: Optional[FieldHasher] = None,
        *,
        strict_witness: bool = True,
    ) -> None:
        self.hasher = hasher if hasher is not None else DEFAULT_HASHER
        self.strict_witness = strict_witness

    @classmethod
    def from_config(cls, config) -> "SparseMerkleVerifier":
        """Build from an SmtConfig (or anything with hasher() and strict_witness)."""
        return cls(config.hasher(), strict_witness=config.strict_witness)

    def _siblings(self, siblings: Sequence[int]) -> tuple[int, ...]:
        return normalize_siblings(siblings, strict=self.strict_witness)

    def calculate_root(self, entry: EntryLike, siblings: Sequence[int], path=None) -> int:
        return calculate_root(entry, self._siblings(siblings), path, self.hasher)

    def calculate_two_roots(
        self, entry: EntryLike, siblings: Sequence[int]
    ) -> tuple[int, int]:
        return calculate_two_roots(entry, self._siblings(siblings), self.hasher)

    def verify(
        self,
        entry: EntryLike,
        matching_entry: Optional[EntryLike],
        siblings: Sequence[int],
        root: int,
    ) -> None:
        verify(entry, matching_entry, self._siblings(siblings), root, self.hasher)

    def add(self, new_entry: EntryLike, old_root: int, siblings: Sequence[int]) -> int:
        return add(new_entry, old_root, self._siblings(siblings), self.hasher)

    def delete(self, entry: EntryLike, old_root: int, siblings: Sequence[int]) -> int:
        return delete(entry, old_root, self._siblings(siblings), self.hasher)

    def update(
        self,
        new_value: int,
        old_entry: EntryLike,
        old_root: int,
        siblings: Sequence[int],
    ) -> int:
        return update(new_value, old_entry, old_root, self._siblings(siblings), self.hasher)

    def verify_proof(self, proof: SmtProof) -> bool:
        return verify_proof(proof, self.hasher)

    def prove_with(self, source: WitnessSource, entry: EntryLike, root: int) -> SmtProof:
        return prove_with(
            source, entry, root, self.hasher, strict=self.strict_witness
        )

    def apply(
        self,
        operation: Operation,
        entry: EntryLike,
        old_root: int,
        siblings: Sequence[int],
        new_value: Optional[int] = None,
    ) -> UpdateReceipt:
        """
        Run add/delete/update by name and record the root transition.

        For "update", `entry` is the old entry and `new_value` is required.

        Raises:
            ValueError: On an unknown operation or a missing new_value
            RootMismatchException: If the witness does not hold for old_root
        """
        entry = as_entry(entry)
        if operation == "add":
            new_root = self.add(entry, old_root, siblings)
            written: Optional[int] = entry.value
        elif operation == "delete":
            new_root = self.delete(entry, old_root, siblings)
            written = None
        elif operation == "update":
            if new_value is None:
                raise ValueError("update requires new_value")
            new_root = self.update(new_value, entry, old_root, siblings)
            written = new_value
        else:
            raise ValueError(f"Unknown operation: {operation!r}")

        return UpdateReceipt(
            operation=operation,
            key=entry.key,
            old_root=old_root,
            new_root=new_root,
            new_value=written,
        )

    def __repr__(self) -> str:
        return (
            f"SparseMerkleVerifier(hasher={self.hasher!r}, "
            f"strict_witness={self.strict_witness})"
        )


__all__ = [
    "Operation",
    "verify",
    "add",
    "delete",
    "update",
    "is_member",
    "is_non_member",
    "verify_proof",
    "prove_with",
    "SparseMerkleVerifier",
]
