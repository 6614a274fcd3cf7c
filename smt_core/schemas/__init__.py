"""
Module 01 - Schemas & Constants

Field/tree constants, the error taxonomy and the proof/receipt models
shared by every other module.
"""

from .constants import (
    EMPTY_TREE_ROOT,
    FIELD_MODULUS,
    LEAF_DOMAIN_CONSTANT,
    SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    TREE_DEPTH,
)
from .errors import (
    ErrorCodes,
    FieldElementException,
    HasherConfigurationException,
    RootMismatchError,
    RootMismatchException,
    SmtError,
    SmtException,
    WitnessShapeException,
)
from .proof import SmtProof, UpdateReceipt

__all__ = [
    # Constants
    "EMPTY_TREE_ROOT",
    "FIELD_MODULUS",
    "LEAF_DOMAIN_CONSTANT",
    "SCHEMA_VERSION",
    "SUPPORTED_SCHEMA_VERSIONS",
    "TREE_DEPTH",
    # Errors
    "ErrorCodes",
    "SmtError",
    "RootMismatchError",
    "SmtException",
    "RootMismatchException",
    "WitnessShapeException",
    "FieldElementException",
    "HasherConfigurationException",
    # Models
    "SmtProof",
    "UpdateReceipt",
]
