"""
Module 03 - Witness Boundary

This core never stores a tree. Sibling paths and matching entries come
from an external storage / proof-generation service, modelled here as the
WitnessSource protocol, and are shape-checked before any hashing.
"""
from __future__ import annotations

from typing import Optional, Protocol, Sequence, runtime_checkable

from smt_core.crypto.hashing import is_field_element
from smt_core.merkle.entry import Entry, EntryLike, as_entry
from smt_core.schemas.constants import TREE_DEPTH
from smt_core.schemas.errors import WitnessShapeException


Siblings = tuple[int, ...]


@runtime_checkable
class WitnessSource(Protocol):
    """Capability interface supplied by the tree-storage collaborator."""

    def siblings_for(self, key: int) -> Sequence[int]:
        """
        Sibling path for key, leaf level first, TREE_DEPTH long.

        For a present key this is its membership path. For an absent key it
        is the path along key's branch decisions up to the point where the
        matching entry (if any) sits.
        """
        ...

    def matching_entry_for(self, key: int) -> Optional[tuple[int, int]]:
        """
        The leaf occupying key's position when key is absent.

        Returns None when key is present, or when key's slot is empty.
        """
        ...


def normalize_siblings(siblings: Sequence[int], *, strict: bool = True) -> Siblings:
    """
    Validate a sibling path and return it as a tuple.

    Args:
        siblings: Sibling nodes, leaf level first; 0 means no sibling
        strict: If False, shorter paths are padded with zeros on the leaf
                side so the last supplied element stays nearest the root

    Returns:
        Tuple of exactly TREE_DEPTH field elements

    Raises:
        WitnessShapeException: On wrong length or non-field elements
    """
    length = len(siblings)
    if length > TREE_DEPTH or (strict and length != TREE_DEPTH):
        raise WitnessShapeException(
            f"Sibling path must have {TREE_DEPTH} elements, got {length}",
            length=length,
        )
    for i, sibling in enumerate(siblings):
        if not is_field_element(sibling):
            raise WitnessShapeException(
                f"siblings[{i}] is not a field element: {sibling!r}",
                index=i,
            )
    padding = (0,) * (TREE_DEPTH - length)
    return padding + tuple(siblings)


def normalize_matching_entry(
    matching_entry: Optional[EntryLike],
) -> Optional[Entry]:
    """None and the all-empty pair (0, 0) both mean "no matching entry"."""
    if matching_entry is None:
        return None
    entry = as_entry(matching_entry)
    if entry.key == 0 and entry.value == 0:
        return None
    return entry


__all__ = [
    "Siblings",
    "WitnessSource",
    "normalize_siblings",
    "normalize_matching_entry",
]
