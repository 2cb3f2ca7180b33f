# Path: uk_accounts/models/__init__.py
"""
uk_accounts Data Models

Data models for accounts extraction:
- Error handling and diagnostics
- Core XBRL structures (Context, Period, Fact)
- Normalized output record

All models use dataclasses.
"""

# ==============================================================================
# ERROR HANDLING
# ==============================================================================

from ..models.error import (
    ErrorSeverity,
    ErrorCategory,
    ParsingError,
    ErrorCollection,
    create_error,
    create_standard_error,
    create_warning,
)

# ==============================================================================
# CONTEXT DATA MODEL
# ==============================================================================

from ..models.context import (
    PeriodType,
    Period,
    UNKNOWN_PERIOD,
    ExplicitMember,
    Context,
)

# ==============================================================================
# FACT DATA MODEL
# ==============================================================================

from ..models.fact import (
    FactSource,
    Fact,
)

# ==============================================================================
# OUTPUT RECORD
# ==============================================================================

from ..models.record import (
    RECORD_FIELDS,
    NormalizedAccountRecord,
)


__all__ = [
    # Errors
    'ErrorSeverity',
    'ErrorCategory',
    'ParsingError',
    'ErrorCollection',
    'create_error',
    'create_standard_error',
    'create_warning',
    # Context
    'PeriodType',
    'Period',
    'UNKNOWN_PERIOD',
    'ExplicitMember',
    'Context',
    # Fact
    'FactSource',
    'Fact',
    # Record
    'RECORD_FIELDS',
    'NormalizedAccountRecord',
]
