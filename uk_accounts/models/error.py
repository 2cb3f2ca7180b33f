# Path: uk_accounts/models/error.py
"""
Diagnostics System

Error classification and collection for accounts extraction.

This module defines:
- Error severity levels (CRITICAL, ERROR, WARNING, INFO)
- Error categories for every recoverable skip the engine performs
- ParsingError with rich context
- ErrorCollection, injected into every component as the diagnostics channel

The engine never raises on malformed input. Every skipped fact, context or
document leaves exactly one ParsingError behind instead.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional
from datetime import datetime


# ==============================================================================
# ERROR SEVERITY LEVELS
# ==============================================================================

class ErrorSeverity(Enum):
    """
    Error severity classification.

    Levels:
        CRITICAL: Cannot continue (e.g., output directory not writable)
        ERROR: Document-level failure (e.g., malformed markup)
        WARNING: Fact-level skip (e.g., unresolved contextRef)
        INFO: Informational, statistics
    """
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    def __str__(self) -> str:
        return self.value

    def __lt__(self, other: 'ErrorSeverity') -> bool:
        """Enable severity comparison (CRITICAL > ERROR > WARNING > INFO)."""
        order = {
            ErrorSeverity.INFO: 0,
            ErrorSeverity.WARNING: 1,
            ErrorSeverity.ERROR: 2,
            ErrorSeverity.CRITICAL: 3
        }
        return order[self] < order[other]

    @property
    def log_level(self) -> int:
        """Matching standard logging level."""
        return {
            ErrorSeverity.INFO: logging.INFO,
            ErrorSeverity.WARNING: logging.WARNING,
            ErrorSeverity.ERROR: logging.ERROR,
            ErrorSeverity.CRITICAL: logging.CRITICAL,
        }[self]


# ==============================================================================
# ERROR CATEGORIES
# ==============================================================================

class ErrorCategory(Enum):
    """
    Error category classification for grouping related errors.
    """
    # Document
    XML_MALFORMED = "XML_MALFORMED"

    # Instance Document
    MISSING_CONTEXT = "MISSING_CONTEXT"
    MISSING_UNIT = "MISSING_UNIT"
    MISSING_FACT = "MISSING_FACT"
    INVALID_PERIOD = "INVALID_PERIOD"

    # Numeric decoding
    INVALID_SCALE = "INVALID_SCALE"
    INVALID_SIGN = "INVALID_SIGN"
    INVALID_VALUE = "INVALID_VALUE"

    # Extraction
    EXTRACTION_FAILED = "EXTRACTION_FAILED"

    # Consumer
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Batch
    ARCHIVE_UNREADABLE = "ARCHIVE_UNREADABLE"

    # Other
    UNKNOWN = "UNKNOWN"

    def __str__(self) -> str:
        return self.value


# ==============================================================================
# PARSING ERROR CLASS
# ==============================================================================

@dataclass
class ParsingError:
    """
    Diagnostic entry for a single skip or failure.

    Attributes:
        severity: Error severity level
        category: Error category
        message: Human-readable error message
        details: Additional error details (optional)
        source_file: Document name where error occurred (optional)
        element_id: Context id, unit id or fact name involved (optional)
        context: Additional context data (optional)
        timestamp: When error occurred
    """
    severity: ErrorSeverity
    category: ErrorCategory
    message: str
    details: Optional[str] = None
    source_file: Optional[str] = None
    element_id: Optional[str] = None
    context: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        """String representation for logging."""
        parts = [f"[{self.severity.value}] {self.category.value}: {self.message}"]

        if self.source_file:
            parts.append(f"Location: {self.source_file}")

        if self.element_id:
            parts.append(f"Element: {self.element_id}")

        if self.details:
            parts.append(f"Details: {self.details}")

        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary for serialization.

        Returns:
            Dictionary representation of error
        """
        return {
            'severity': self.severity.value,
            'category': self.category.value,
            'message': self.message,
            'details': self.details,
            'source_file': self.source_file,
            'element_id': self.element_id,
            'context': self.context,
            'timestamp': self.timestamp.isoformat(),
        }


# ==============================================================================
# ERROR COLLECTION
# ==============================================================================

@dataclass
class ErrorCollection:
    """
    Collection of parsing errors with statistics and filtering.

    Each added error is mirrored to the logger at the level matching its
    severity and, when a listener is set, forwarded to it.

    Attributes:
        errors: list of parsing errors
        listener: Optional callback invoked with every added error

    Example:
        errors = ErrorCollection(listener=print)
        errors.report_warning(ErrorCategory.MISSING_UNIT, "Unit not found: U9")
    """
    errors: list[ParsingError] = field(default_factory=list)
    listener: Optional[Callable[[ParsingError], None]] = None

    def __post_init__(self):
        self.logger = logging.getLogger(__name__)

    def add(self, error: ParsingError) -> None:
        """Add error to collection."""
        self.errors.append(error)
        self.logger.log(error.severity.log_level, str(error))
        if self.listener is not None:
            self.listener(error)

    def extend(self, errors: list[ParsingError]) -> None:
        """Add multiple errors to collection."""
        for error in errors:
            self.add(error)

    def report_warning(
        self,
        category: ErrorCategory,
        message: str,
        **kwargs
    ) -> ParsingError:
        """Create a WARNING entry and add it."""
        error = create_warning(category, message, **kwargs)
        self.add(error)
        return error

    def report_error(
        self,
        category: ErrorCategory,
        message: str,
        **kwargs
    ) -> ParsingError:
        """Create an ERROR entry and add it."""
        error = create_standard_error(category, message, **kwargs)
        self.add(error)
        return error

    def get_by_severity(self, severity: ErrorSeverity) -> list[ParsingError]:
        """Get all errors of specific severity."""
        return [e for e in self.errors if e.severity == severity]

    def get_by_category(self, category: ErrorCategory) -> list[ParsingError]:
        """Get all errors of specific category."""
        return [e for e in self.errors if e.category == category]

    def has_errors(self) -> bool:
        """Check if collection contains ERROR level or higher."""
        return any(e.severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL)
                   for e in self.errors)

    def count_by_severity(self) -> dict[ErrorSeverity, int]:
        """Count errors by severity level."""
        counts = {severity: 0 for severity in ErrorSeverity}
        for error in self.errors:
            counts[error.severity] += 1
        return counts

    def count_by_category(self) -> dict[ErrorCategory, int]:
        """Count errors by category."""
        counts = {}
        for error in self.errors:
            counts[error.category] = counts.get(error.category, 0) + 1
        return counts

    def clear(self) -> None:
        """Drop all collected errors."""
        self.errors.clear()

    def to_dict_list(self) -> list[dict[str, Any]]:
        """Convert all errors to list of dictionaries."""
        return [e.to_dict() for e in self.errors]

    def __len__(self) -> int:
        """Number of errors in collection."""
        return len(self.errors)

    def __bool__(self) -> bool:
        """True if collection has errors."""
        return len(self.errors) > 0

    def __iter__(self):
        """Iterate over errors."""
        return iter(self.errors)


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================

def create_error(
    severity: ErrorSeverity,
    category: ErrorCategory,
    message: str,
    **kwargs
) -> ParsingError:
    """
    Convenience function to create a ParsingError.

    Args:
        severity: Error severity
        category: Error category
        message: Error message
        **kwargs: Additional error attributes

    Returns:
        ParsingError instance
    """
    return ParsingError(
        severity=severity,
        category=category,
        message=message,
        **kwargs
    )


def create_standard_error(category: ErrorCategory, message: str, **kwargs) -> ParsingError:
    """Create ERROR level error."""
    return create_error(ErrorSeverity.ERROR, category, message, **kwargs)


def create_warning(category: ErrorCategory, message: str, **kwargs) -> ParsingError:
    """Create WARNING level error."""
    return create_error(ErrorSeverity.WARNING, category, message, **kwargs)


__all__ = [
    'ErrorSeverity',
    'ErrorCategory',
    'ParsingError',
    'ErrorCollection',
    'create_error',
    'create_standard_error',
    'create_warning',
]
