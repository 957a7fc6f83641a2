#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Result objects system for Simple Cut

This module provides rich result objects that replace boolean returns throughout
the application. Store operations, validation and export all report their
outcome through these objects instead of raising.
"""

from typing import TypeVar, Generic, Optional, List, Dict, Any
from dataclasses import dataclass, field
from enum import Enum

from .exceptions import SimpleCutError

# Type variable for generic result values
T = TypeVar('T')


@dataclass
class Result(Generic[T]):
    """
    Universal result object that replaces boolean returns

    Provides type-safe error handling with rich context information
    and support for warnings and metadata.
    """
    success: bool
    value: Optional[T] = None
    error: Optional[SimpleCutError] = None
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls, value: T, warnings: Optional[List[str]] = None, **metadata) -> 'Result[T]':
        """
        Create a successful result

        Args:
            value: The successful result value
            warnings: Optional list of warnings
            **metadata: Additional metadata to store

        Returns:
            Result object indicating success
        """
        return cls(
            success=True,
            value=value,
            error=None,
            warnings=warnings or [],
            metadata=metadata
        )

    @classmethod
    def error(cls, error: SimpleCutError, warnings: Optional[List[str]] = None) -> 'Result[T]':
        """
        Create an error result

        Args:
            error: The error that occurred
            warnings: Optional list of warnings that occurred before the error

        Returns:
            Result object indicating failure
        """
        return cls(
            success=False,
            error=error,
            warnings=warnings or []
        )

    def unwrap(self) -> T:
        """
        Get value or raise error

        Raises:
            SimpleCutError: If the result indicates failure
        """
        if not self.success:
            raise self.error
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get value or return default"""
        return self.value if self.success else default

    def has_warnings(self) -> bool:
        """Check if result has warnings"""
        return len(self.warnings) > 0

    def add_warning(self, warning: str) -> 'Result[T]':
        """Add a warning to this result"""
        self.warnings.append(warning)
        return self

    def add_metadata(self, key: str, value: Any) -> 'Result[T]':
        """Add metadata to this result"""
        self.metadata[key] = value
        return self


class NoOpReason(Enum):
    """Why a store or settings operation left the state untouched"""
    KEY_NOT_FOUND = "key_not_found"
    EMPTY_INPUT = "empty_input"
    AT_TOP = "at_top"
    AT_BOTTOM = "at_bottom"
    ALREADY_EMPTY = "already_empty"
    SAME_KEY = "same_key"
    UNKNOWN_FIELD = "unknown_field"
    INVALID_VALUE = "invalid_value"


@dataclass
class StoreOperationResult(Result[Any]):
    """
    Outcome of a slice store or settings model mutation

    Mutations never fail: they either change the state or degrade to a
    no-op, in which case ``noop_reason`` says why.
    """
    changed: bool = False
    noop_reason: Optional[NoOpReason] = None

    @property
    def is_noop(self) -> bool:
        """True when the operation left the state unchanged"""
        return not self.changed

    @classmethod
    def applied(cls, value: Any = None, warnings: Optional[List[str]] = None,
                **metadata) -> 'StoreOperationResult':
        """Create a result for a mutation that changed the state"""
        return cls(
            success=True,
            value=value,
            error=None,
            warnings=warnings or [],
            metadata=metadata,
            changed=True
        )

    @classmethod
    def noop(cls, reason: NoOpReason, warnings: Optional[List[str]] = None,
             **metadata) -> 'StoreOperationResult':
        """Create a result for an operation that degraded to a no-op"""
        return cls(
            success=True,
            error=None,
            warnings=warnings or [],
            metadata=metadata,
            changed=False,
            noop_reason=reason
        )


@dataclass(frozen=True)
class FieldError:
    """A single field-scoped validation message"""
    field: str
    code: str
    message: str


@dataclass
class ValidationResult(Result[None]):
    """
    Validation results with field-specific errors

    ``errors`` keeps the order in which rules were evaluated;
    ``field_errors`` maps each field to its message for form rendering.
    """
    errors: List[FieldError] = field(default_factory=list)
    field_errors: Dict[str, str] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        """Check if validation has errors"""
        return bool(self.errors) or not self.success

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def messages(self) -> List[str]:
        """Error messages in rule order"""
        return [error.message for error in self.errors]

    def errors_for(self, field_name: str) -> List[FieldError]:
        """All errors reported for one field"""
        return [error for error in self.errors if error.field == field_name]

    @classmethod
    def create_valid(cls, warnings: Optional[List[str]] = None) -> 'ValidationResult':
        """Create a valid validation result"""
        return cls(success=True, error=None, warnings=warnings or [])

    @classmethod
    def create_invalid(cls, errors: List[FieldError],
                       warnings: Optional[List[str]] = None) -> 'ValidationResult':
        """Create an invalid validation result"""
        from .exceptions import ValidationError
        field_errors = {error.field: error.message for error in errors}
        return cls(
            success=False,
            error=ValidationError(dict(field_errors)),
            errors=list(errors),
            field_errors=field_errors,
            warnings=warnings or []
        )

    def add_field_error(self, field_name: str, code: str, message: str) -> 'ValidationResult':
        """Add a field-specific error"""
        from .exceptions import ValidationError
        self.errors.append(FieldError(field_name, code, message))
        self.field_errors.setdefault(field_name, message)
        self.error = ValidationError(dict(self.field_errors))
        self.success = False
        return self


@dataclass
class ExportOperationResult(Result[List[Dict[str, Any]]]):
    """
    Aggregate outcome of one export action

    ``success`` is the logical AND of every dispatched request. The
    per-request records in ``item_results`` are kept for logging.
    """
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    item_results: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def create(cls, item_results: List[Dict[str, Any]], **kwargs) -> 'ExportOperationResult':
        """
        Create ExportOperationResult from individual request outcomes

        Args:
            item_results: One dict per request with at least a 'success' key
            **kwargs: Additional arguments

        Returns:
            ExportOperationResult instance
        """
        total = len(item_results)
        successful = sum(1 for result in item_results if result.get('success', False))
        failed = total - successful
        overall_success = failed == 0

        error = None
        if not overall_success:
            from .exceptions import ExportError
            error = ExportError(
                f"{failed} of {total} export request(s) failed",
                context={'failed_requests': failed, 'total_requests': total}
            )

        return cls(
            success=overall_success,
            value=item_results,
            error=error,
            total_requests=total,
            successful_requests=successful,
            failed_requests=failed,
            item_results=item_results,
            **kwargs
        )
