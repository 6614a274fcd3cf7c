"""
Core cryptographic utilities.

Module 02 provides the field hash consumed by the tree operations and
field encoding helpers.
"""
from .hashing import (
    DEFAULT_HASHER,
    FIELD_BYTES,
    FieldHasher,
    PoseidonFunction,
    PoseidonHasher,
    STARKNET_PRIME,
    Sha256FieldHasher,
    bytes_to_field,
    ensure_field_element,
    field_from_hex,
    field_to_bytes,
    field_to_hex,
    from_hex,
    hash_inputs,
    is_field_element,
    load_hasher,
    resolve_callable,
    sha256,
    to_hex,
)

__all__ = [
    "DEFAULT_HASHER",
    "FIELD_BYTES",
    "FieldHasher",
    "PoseidonFunction",
    "STARKNET_PRIME",
    "PoseidonHasher",
    "Sha256FieldHasher",
    "bytes_to_field",
    "ensure_field_element",
    "field_from_hex",
    "field_to_bytes",
    "field_to_hex",
    "from_hex",
    "hash_inputs",
    "is_field_element",
    "load_hasher",
    "resolve_callable",
    "sha256",
    "to_hex",
]
