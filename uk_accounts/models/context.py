# Path: uk_accounts/models/context.py
"""
Context Data Model

XBRL context representation with period and explicit-member segment.

This module defines:
- Period types (duration, instant, forever, unknown)
- Period with the date strings exactly as written in the document
- ExplicitMember (single dimension-member pair from the segment)
- Context dataclass
"""

from dataclasses import dataclass
from typing import Any, Optional
from enum import Enum


# ==============================================================================
# PERIOD TYPE
# ==============================================================================

class PeriodType(Enum):
    """
    Period type classification.

    Types:
        DURATION: Time range (start to end)
        INSTANT: Single point in time
        FOREVER: Permanent/unlimited timeframe (rare)
        UNKNOWN: No usable period element
    """
    DURATION = "duration"
    INSTANT = "instant"
    FOREVER = "forever"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


# ==============================================================================
# PERIOD
# ==============================================================================

@dataclass(frozen=True)
class Period:
    """
    Period (temporal context).

    Dates are not parsed. Filings use a handful of date spellings and the
    record has to reproduce them verbatim, so only whitespace is removed.

    Attributes:
        period_type: Type of period
        start_date: Start date for duration period
        end_date: End date for duration period
        instant: Date for instant period

    Usage:
        Period(PeriodType.INSTANT, instant="2023-12-31")
        Period(PeriodType.DURATION, start_date="2023-01-01", end_date="2023-12-31")
    """
    period_type: PeriodType
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    instant: Optional[str] = None

    def is_instant(self) -> bool:
        """Check if instant period."""
        return self.period_type == PeriodType.INSTANT

    def is_duration(self) -> bool:
        """Check if duration period."""
        return self.period_type == PeriodType.DURATION

    def is_forever(self) -> bool:
        """Check if forever period."""
        return self.period_type == PeriodType.FOREVER

    def get_label(self) -> str:
        """
        Get human-readable period label.

        Returns:
            Formatted period string
        """
        if self.is_instant():
            return f"As of {self.instant}"
        elif self.is_duration():
            return f"{self.start_date} to {self.end_date}"
        elif self.is_forever():
            return "Forever"
        else:
            return "Unknown period"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            'period_type': self.period_type.value,
            'start_date': self.start_date,
            'end_date': self.end_date,
            'instant': self.instant,
            'label': self.get_label()
        }


UNKNOWN_PERIOD = Period(PeriodType.UNKNOWN)


# ==============================================================================
# DIMENSION
# ==============================================================================

@dataclass(frozen=True)
class ExplicitMember:
    """
    Explicit dimension member from a context segment.

    Attributes:
        member: Member text, whitespace removed (e.g. "bus:Director1")
        dimension: Dimension QName from the dimension attribute

    Example:
        ExplicitMember(member="bus:Director1", dimension="bus:EntityOfficersDimension")
    """
    member: str
    dimension: Optional[str] = None

    def to_dict(self) -> dict[str, Optional[str]]:
        """Convert to dictionary."""
        return {
            'member': self.member,
            'dimension': self.dimension,
        }


# ==============================================================================
# CONTEXT
# ==============================================================================

@dataclass(frozen=True)
class Context:
    """
    XBRL context.

    Attributes:
        id: Context ID (unique within the document)
        period: Context period
        segment: First explicit member of the entity segment, if any
    """
    id: str
    period: Period
    segment: Optional[ExplicitMember] = None

    def has_segment(self) -> bool:
        """Check if context carries an explicit member."""
        return self.segment is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'period': self.period.to_dict(),
            'segment': self.segment.to_dict() if self.segment else None,
        }


__all__ = [
    'PeriodType',
    'Period',
    'UNKNOWN_PERIOD',
    'ExplicitMember',
    'Context',
]
