"""
Module 01 - Schemas & Constants
File: proof.py

Purpose: Proof and receipt schemas for sparse Merkle tree operations.

An SmtProof bundles everything needed to check one membership or
non-membership claim against a root. Siblings are stored leaf-first,
exactly TREE_DEPTH long, with 0 marking levels that have no sibling.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import (
    FIELD_MODULUS,
    SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    TREE_DEPTH,
)


def _check_field(value: int, name: str) -> int:
    if not 0 <= value < FIELD_MODULUS:
        raise ValueError(f"{name} is not an element of the field: {value}")
    return value


def _check_schema_version(value: str) -> str:
    if value not in SUPPORTED_SCHEMA_VERSIONS:
        raise ValueError(
            f"Unsupported schema version: {value}. "
            f"Supported versions: {sorted(SUPPORTED_SCHEMA_VERSIONS)}"
        )
    return value


class SmtProof(BaseModel):
    """
    Membership or non-membership proof for a single key.

    membership=True: `entry` itself is a leaf of the tree under `root`.
    membership=False: `matching_entry` is a leaf positioned on `entry`'s
    path, which leaves no room for a leaf at `entry.key`.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: str = Field(default=SCHEMA_VERSION)
    entry: tuple[int, int] = Field(..., description="(key, value) being proven")
    matching_entry: tuple[int, int] | None = Field(
        default=None,
        description="Existing (key, value) sharing entry's path prefix",
    )
    siblings: list[int] = Field(
        ...,
        description="Sibling nodes, leaf level first; 0 means no sibling",
    )
    root: int = Field(..., description="Root the proof is checked against")
    membership: bool = Field(..., description="True for inclusion proofs")

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, v: str) -> str:
        return _check_schema_version(v)

    @field_validator("entry")
    @classmethod
    def validate_entry(cls, v: tuple[int, int]) -> tuple[int, int]:
        _check_field(v[0], "entry key")
        _check_field(v[1], "entry value")
        return v

    @field_validator("matching_entry")
    @classmethod
    def validate_matching_entry(
        cls, v: tuple[int, int] | None
    ) -> tuple[int, int] | None:
        """Both slots empty is the same as no matching entry."""
        if v is None or v == (0, 0):
            return None
        _check_field(v[0], "matching entry key")
        _check_field(v[1], "matching entry value")
        return v

    @field_validator("siblings")
    @classmethod
    def validate_siblings(cls, v: list[int]) -> list[int]:
        if len(v) != TREE_DEPTH:
            raise ValueError(
                f"siblings must have exactly {TREE_DEPTH} elements, got {len(v)}"
            )
        for i, sibling in enumerate(v):
            _check_field(sibling, f"siblings[{i}]")
        return v

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: int) -> int:
        return _check_field(v, "root")

    @model_validator(mode="after")
    def validate_mode(self) -> "SmtProof":
        """Membership proofs never carry a matching entry."""
        if self.membership and self.matching_entry is not None:
            raise ValueError("membership proofs must not carry a matching_entry")
        if not self.membership and self.matching_entry is None:
            raise ValueError("non-membership proofs require a matching_entry")
        return self

    @property
    def depth(self) -> int:
        """Number of levels that actually contribute a hashing step."""
        return sum(1 for s in self.siblings if s != 0)

    @classmethod
    def from_witness(cls, entry: tuple[int, int], source: Any, root: int) -> "SmtProof":
        """
        Build a proof from a WitnessSource.

        Args:
            entry: (key, value) being proven. For non-membership the value
                   is ignored by verification.
            source: Object implementing siblings_for / matching_entry_for
            root: Root the proof is checked against

        Returns:
            SmtProof in membership mode if the source reports no matching
            entry, non-membership mode otherwise.

        Raises:
            pydantic.ValidationError: If the source returns a malformed
                witness. prove_with normalizes the witness first and raises
                the library exceptions instead.
        """
        key = entry[0]
        matching = source.matching_entry_for(key)
        if matching is not None and tuple(matching) == (0, 0):
            matching = None
        return cls(
            entry=entry,
            matching_entry=tuple(matching) if matching is not None else None,
            siblings=list(source.siblings_for(key)),
            root=root,
            membership=matching is None,
        )


class UpdateReceipt(BaseModel):
    """Record of a single root transition produced by add/delete/update."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: str = Field(default=SCHEMA_VERSION)
    operation: Literal["add", "delete", "update"]
    key: int
    old_root: int
    new_root: int
    new_value: int | None = Field(
        default=None,
        description="Value written by add/update; None for delete",
    )

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, v: str) -> str:
        return _check_schema_version(v)

    @property
    def changed(self) -> bool:
        return self.old_root != self.new_root


__all__ = [
    "SmtProof",
    "UpdateReceipt",
]
