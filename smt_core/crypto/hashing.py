"""
Module 02 - Hashing Utilities
Field-element hashing for sparse Merkle tree leaves and internal nodes.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- The FieldHasher protocol consumed by the tree operations
- A SHA-256 backend reduced into the BN254 scalar field (default)
- A Poseidon backend wrapping any n-ary Poseidon function
- Field <-> bytes/hex conversion helpers

Hashing Rules (Hard Contracts):
1. Leaf hashing:     H(key, value, 1)   - 3-ary, constant 1 appended
2. Internal hashing: H(left, right)     - 2-ary
3. Arity is the only domain separator; there is no tag bit.
4. Every output is reduced into [0, FIELD_MODULUS).

Security Notes:
- Output 0 is reserved as the "no sibling" / empty-tree sentinel. A real
  hash hitting 0 is treated as a negligible-probability event and is not
  checked for.
"""
from __future__ import annotations

import hashlib
import importlib
import logging
from typing import Callable, Protocol, Sequence, runtime_checkable

from smt_core.schemas.constants import FIELD_MODULUS, LEAF_DOMAIN_CONSTANT
from smt_core.schemas.errors import (
    FieldElementException,
    HasherConfigurationException,
)

logger = logging.getLogger(__name__)

FIELD_BYTES: int = 32


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest
    """
    return hashlib.sha256(data).digest()


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def is_field_element(value: object) -> bool:
    """True if value is an int (not bool) in [0, FIELD_MODULUS)."""
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value < FIELD_MODULUS
    )


def ensure_field_element(value: object, name: str = "value") -> int:
    """
    Return value unchanged if it is a field element.

    Raises:
        FieldElementException: If value is not an int in the field
    """
    if not is_field_element(value):
        raise FieldElementException(
            f"{name} is not an element of the field: {value!r}",
            field_name=name,
        )
    return value  # type: ignore[return-value]


def field_to_bytes(value: int) -> bytes:
    """Encode a field element as 32 big-endian bytes."""
    return ensure_field_element(value).to_bytes(FIELD_BYTES, byteorder="big")


def bytes_to_field(data: bytes) -> int:
    """Interpret bytes as a big-endian integer reduced into the field."""
    return int.from_bytes(data, byteorder="big") % FIELD_MODULUS


def field_to_hex(value: int) -> str:
    """Encode a field element as 0x-prefixed, 64-digit hex."""
    return to_hex(field_to_bytes(value))


def field_from_hex(hex_string: str) -> int:
    """
    Decode 0x-prefixed hex into a field element.

    Raises:
        ValueError: On malformed hex
        FieldElementException: If the decoded integer is outside the field
    """
    return ensure_field_element(
        int.from_bytes(from_hex(hex_string), byteorder="big"), "hex value"
    )


# =============================================================================
# Hash backends
# =============================================================================


@runtime_checkable
class FieldHasher(Protocol):
    """Collision-resistant hash over the field with leaf and node modes."""

    def hash(self, left: int, right: int, is_leaf: bool) -> int:
        """
        Hash two field elements.

        Args:
            left: Leaf key, or left child node
            right: Leaf value, or right child node
            is_leaf: True for H(left, right, 1), False for H(left, right)

        Returns:
            Field element
        """
        ...


def hash_inputs(left: int, right: int, is_leaf: bool) -> list[int]:
    """Input vector for one hash call: leaf hashes append the constant 1."""
    if is_leaf:
        return [left, right, LEAF_DOMAIN_CONSTANT]
    return [left, right]


class Sha256FieldHasher:
    """
    SHA-256 over fixed-width encodings, reduced into the field.

    Inputs are encoded as 32 big-endian bytes each, so a 2-ary preimage is
    64 bytes and a 3-ary preimage 96 bytes; the two modes cannot share a
    preimage.
    """

    name = "sha256"

    def hash(self, left: int, right: int, is_leaf: bool) -> int:
        preimage = b"".join(field_to_bytes(x) for x in hash_inputs(left, right, is_leaf))
        return bytes_to_field(sha256(preimage))

    def __repr__(self) -> str:
        return "Sha256FieldHasher()"


PoseidonFunction = Callable[[Sequence[int]], int]

# Prime of the field poseidon_py's poseidon_hash_many works in (Starknet).
# It is smaller than FIELD_MODULUS.
STARKNET_PRIME: int = 2**251 + 17 * 2**192 + 1


class PoseidonHasher:
    """
    Adapter from an n-ary Poseidon function to the FieldHasher protocol.

    The wrapped function receives [key, value, 1] for leaves and
    [left, right] for internal nodes. Roots interoperate with other
    implementations only when the function is the same Poseidon instance
    (field, round constants, capacity layout) they use.

    When no function is given, poseidon_py's poseidon_hash_many is used.
    It works over the Starknet prime, which is below FIELD_MODULUS: inputs
    x and x + STARKNET_PRIME would hash alike, so inputs at or above
    STARKNET_PRIME are rejected. Its roots do not match circomlib roots.

    Args:
        poseidon: n-ary hash function, or None for poseidon_py
        input_modulus: Exclusive upper bound on hash inputs, for functions
                       whose own field is smaller than FIELD_MODULUS
    """

    name = "poseidon"

    def __init__(
        self,
        poseidon: PoseidonFunction | None = None,
        input_modulus: int | None = None,
    ) -> None:
        if poseidon is None:
            poseidon = _default_poseidon()
            if input_modulus is None:
                input_modulus = STARKNET_PRIME
        self._poseidon = poseidon
        self.input_modulus = input_modulus

    def hash(self, left: int, right: int, is_leaf: bool) -> int:
        inputs = hash_inputs(left, right, is_leaf)
        if self.input_modulus is not None:
            for x in inputs:
                if x >= self.input_modulus:
                    raise FieldElementException(
                        f"Hash input {x:#x} is outside the hash function's field "
                        f"(modulus {self.input_modulus:#x})",
                        field_name="hash input",
                    )
        return int(self._poseidon(inputs)) % FIELD_MODULUS

    def __repr__(self) -> str:
        fn = getattr(self._poseidon, "__qualname__", repr(self._poseidon))
        return f"PoseidonHasher({fn})"


def _default_poseidon() -> PoseidonFunction:
    try:
        from poseidon_py.poseidon_hash import poseidon_hash_many
    except ImportError as e:
        raise HasherConfigurationException(
            "poseidon backend requires the 'poseidon' extra (poseidon-py)",
            backend="poseidon",
        ) from e
    return poseidon_hash_many


def resolve_callable(reference: str) -> Callable:
    """
    Import a "package.module:attribute" reference.

    Raises:
        HasherConfigurationException: If the reference is malformed, the
            module cannot be imported or the attribute is missing/not callable
    """
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise HasherConfigurationException(
            f"Expected 'module:callable', got {reference!r}", backend=reference
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise HasherConfigurationException(
            f"Cannot import hash module {module_name!r}: {e}", backend=reference
        ) from e
    fn = getattr(module, attr, None)
    if not callable(fn):
        raise HasherConfigurationException(
            f"{reference!r} does not name a callable", backend=reference
        )
    return fn


def load_hasher(backend: str = "sha256") -> FieldHasher:
    """
    Build a FieldHasher from a backend name.

    Args:
        backend: "sha256", "poseidon", or "module:callable" naming an
                 n-ary Poseidon function (wrapped in PoseidonHasher)

    Returns:
        FieldHasher instance

    Raises:
        HasherConfigurationException: If the backend cannot be resolved
    """
    normalized = backend.strip()
    if normalized.lower() == "sha256":
        hasher: FieldHasher = Sha256FieldHasher()
    elif normalized.lower() == "poseidon":
        hasher = PoseidonHasher()
    elif ":" in normalized:
        hasher = PoseidonHasher(resolve_callable(normalized))
    else:
        raise HasherConfigurationException(
            f"Unknown hash backend: {backend!r}", backend=backend
        )
    logger.debug(f"Loaded hash backend {backend!r}: {hasher!r}")
    return hasher


DEFAULT_HASHER: FieldHasher = Sha256FieldHasher()


__all__ = [
    "FIELD_BYTES",
    "sha256",
    "to_hex",
    "from_hex",
    "is_field_element",
    "ensure_field_element",
    "field_to_bytes",
    "bytes_to_field",
    "field_to_hex",
    "field_from_hex",
    "FieldHasher",
    "hash_inputs",
    "Sha256FieldHasher",
    "PoseidonHasher",
    "PoseidonFunction",
    "STARKNET_PRIME",
    "resolve_callable",
    "load_hasher",
    "DEFAULT_HASHER",
]
