"""
Module 01 - Schemas & Constants
File: errors.py

Purpose: Standard error taxonomy for the sparse Merkle tree core.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Root mismatch is the only runtime failure of the tree operations. The
remaining exceptions reject malformed inputs before any hashing happens.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Operation outcome
    ROOT_MISMATCH = "ROOT_MISMATCH"

    # Input shape
    WITNESS_SHAPE_INVALID = "WITNESS_SHAPE_INVALID"
    FIELD_ELEMENT_INVALID = "FIELD_ELEMENT_INVALID"

    # Collaborators
    HASHER_UNAVAILABLE = "HASHER_UNAVAILABLE"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class SmtError(BaseModel):
    """
    Base error model for structured error communication.

    Used by callers that collect failures (for instance while checking a
    batch of independent proofs) instead of letting exceptions propagate.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.ROOT_MISMATCH],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "SmtException":
        """Convert this error model to a raised exception."""
        return SmtException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


class RootMismatchError(SmtError):
    """Error model for a recomputed root disagreeing with the expected one."""

    code: str = Field(default=ErrorCodes.ROOT_MISMATCH)
    operation: str | None = Field(
        default=None,
        description="Operation that failed (verify/add/delete/update)",
    )
    expected: str | None = Field(default=None, description="Expected root (0x-hex)")
    computed: str | None = Field(default=None, description="Computed root (0x-hex)")


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class SmtException(Exception):
    """
    Base exception for all sparse Merkle tree errors.

    This exception carries structured error information and can be
    converted to/from SmtError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "SMT_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> SmtError:
        """Convert this exception to an SmtError model."""
        return SmtError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class RootMismatchException(SmtException):
    """
    Raised when a recomputed root disagrees with the caller-supplied root.

    The computation is pure, so retrying with the same inputs always fails
    the same way.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        expected: int | None = None,
        computed: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if operation:
            full_details["operation"] = operation
        if expected is not None:
            full_details["expected"] = hex(expected)
        if computed is not None:
            full_details["computed"] = hex(computed)
        super().__init__(
            message=message,
            code=ErrorCodes.ROOT_MISMATCH,
            details=full_details,
            retryable=False,
        )
        self.operation = operation
        self.expected = expected
        self.computed = computed

    def to_error_model(self) -> RootMismatchError:
        return RootMismatchError(
            message=self.message,
            details=self.details,
            operation=self.operation,
            expected=self.details.get("expected"),
            computed=self.details.get("computed"),
        )


class WitnessShapeException(SmtException):
    """Raised when a sibling path has the wrong length or bad elements."""

    def __init__(
        self,
        message: str,
        length: int | None = None,
        index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if length is not None:
            full_details["length"] = length
        if index is not None:
            full_details["index"] = index
        super().__init__(
            message=message,
            code=ErrorCodes.WITNESS_SHAPE_INVALID,
            details=full_details,
            retryable=False,
        )


class FieldElementException(SmtException):
    """Raised when a key, value or root is not an element of the field."""

    def __init__(
        self,
        message: str,
        field_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_name:
            full_details["field_name"] = field_name
        super().__init__(
            message=message,
            code=ErrorCodes.FIELD_ELEMENT_INVALID,
            details=full_details,
            retryable=False,
        )


class HasherConfigurationException(SmtException):
    """Raised when a hash backend cannot be resolved or imported."""

    def __init__(
        self,
        message: str,
        backend: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if backend:
            full_details["backend"] = backend
        super().__init__(
            message=message,
            code=ErrorCodes.HASHER_UNAVAILABLE,
            details=full_details,
            retryable=False,
        )
