"""
Error model for the record-to-model mapper.

Provides structured error codes and the single exception type raised by
mapping operations.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Structured error codes for mapping failures."""
    INVALID_TARGET = "INVALID_TARGET"
    INVALID_SOURCE = "INVALID_SOURCE"
    SHAPE_MISMATCH = "SHAPE_MISMATCH"
    CONSTRUCTION_ERROR = "CONSTRUCTION_ERROR"


class MappingError(Exception):
    """Raised when a record cannot be mapped onto a target model."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        field_path: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        """
        Initialize a mapping error.

        Args:
            code: The error code
            message: Human-readable error message
            field_path: Dotted path of the target field involved, if any
            original_error: The original exception if this wraps another error
        """
        self.code = code
        self.message = message
        self.field_path = field_path
        self.original_error = original_error
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to dictionary format."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "field": self.field_path
            }
        }


def sanitize_stack_trace(error_msg: str) -> str:
    """
    Remove stack traces and multi-line detail from error messages.

    Args:
        error_msg: The original error message

    Returns:
        First line of the message, stripped
    """
    lines = error_msg.split('\n')
    if lines:
        return lines[0].strip()
    return error_msg


def _type_name(target: object) -> str:
    return getattr(target, "__qualname__", None) or repr(target)


def create_invalid_target_error(target: object, reason: str) -> MappingError:
    """
    Create an error for a target type that cannot be mapped onto.

    Args:
        target: The offending target type
        reason: Why the target is unusable

    Returns:
        MappingError with INVALID_TARGET code
    """
    return MappingError(
        code=ErrorCode.INVALID_TARGET,
        message=f"Invalid target type {_type_name(target)}: {reason}"
    )


def create_invalid_source_error(source: object, target: object) -> MappingError:
    """
    Create an error for a top-level source that is not record-shaped.

    Args:
        source: The offending source value
        target: The target type the source was mapped onto

    Returns:
        MappingError with INVALID_SOURCE code
    """
    return MappingError(
        code=ErrorCode.INVALID_SOURCE,
        message=(
            f"Invalid source for {_type_name(target)}: "
            f"expected a record, got {type(source).__name__}"
        )
    )


def create_shape_mismatch_error(field_path: str, source_value: object, expected: str) -> MappingError:
    """
    Create an error for a source value that does not fit its target field.

    Only raised in strict mode; lenient mapping leaves the field at its zero value.

    Args:
        field_path: Dotted path of the target field
        source_value: The source value that did not fit
        expected: Description of the target field's declared type

    Returns:
        MappingError with SHAPE_MISMATCH code
    """
    return MappingError(
        code=ErrorCode.SHAPE_MISMATCH,
        message=(
            f"Shape mismatch at {field_path}: cannot map "
            f"{type(source_value).__name__} onto {expected}"
        ),
        field_path=field_path
    )


def create_construction_error(
    message: str,
    field_path: Optional[str] = None,
    original_error: Optional[Exception] = None
) -> MappingError:
    """
    Create an error for a model that could not be built from mapped values.

    Args:
        message: Description of the failure
        field_path: Dotted path of the failing field, if known
        original_error: The original exception

    Returns:
        MappingError with CONSTRUCTION_ERROR code
    """
    return MappingError(
        code=ErrorCode.CONSTRUCTION_ERROR,
        message=sanitize_stack_trace(message),
        field_path=field_path,
        original_error=original_error
    )
