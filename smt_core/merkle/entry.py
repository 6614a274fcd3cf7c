"""
Module 03 - Tree Entries

Owner: Protocol/Crypto Engineer
Module ID: M03
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple, Union

from smt_core.crypto.hashing import ensure_field_element


@dataclass(frozen=True)
class Entry:
    """
    A (key, value) pair stored at one leaf of the tree.

    Both members are field elements. The key alone decides the leaf's
    position; the value is opaque payload.

    Attributes:
        key: Leaf key
        value: Leaf value
    """
    key: int
    value: int

    def __post_init__(self) -> None:
        ensure_field_element(self.key, "key")
        ensure_field_element(self.value, "value")

    def __iter__(self) -> Iterator[int]:
        yield self.key
        yield self.value

    def as_tuple(self) -> tuple[int, int]:
        return (self.key, self.value)


EntryLike = Union[Entry, Tuple[int, int]]


def as_entry(entry: EntryLike) -> Entry:
    """Accept an Entry or a (key, value) pair."""
    if isinstance(entry, Entry):
        return entry
    key, value = entry
    return Entry(key, value)


__all__ = [
    "Entry",
    "EntryLike",
    "as_entry",
]
