# Path: uk_accounts/models/record.py
"""
Normalized Account Record

One output row per extracted fact.

Field order of to_row() is the output contract shared by every sink:
registered_number, account, segment_label, value, unit,
start_date, end_date, instant, forever, filing_date
"""

from dataclasses import dataclass, field, replace
from typing import Any, Optional, Union

from ..models.fact import Fact


RECORD_FIELDS: tuple[str, ...] = (
    'registered_number',
    'account',
    'segment_label',
    'value',
    'unit',
    'start_date',
    'end_date',
    'instant',
    'forever',
    'filing_date',
)


@dataclass
class NormalizedAccountRecord:
    """
    Normalized account record.

    Attributes:
        company_number: Registered company number
        account: Tag local name (e.g., 'DividendsPaid')
        segment_label: Individual name behind the fact, if resolved
        value: Decoded value
        unit: Unit code ('' for pure, None for textual facts)
        start_date: Duration start
        end_date: Duration end
        instant: Instant date
        forever: True for forever periods
        filing_date: Filing date parsed from the document name
        context_ref: Source context id, used for de-duplication only
    """
    company_number: Optional[str]
    account: str
    segment_label: Optional[str]
    value: Optional[Union[int, str]]
    unit: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    instant: Optional[str] = None
    forever: bool = False
    filing_date: Optional[str] = None
    context_ref: Optional[str] = field(default=None, compare=False)

    @classmethod
    def from_fact(
        cls,
        fact: Fact,
        company_number: Optional[str],
        filing_date: Optional[str] = None
    ) -> 'NormalizedAccountRecord':
        """
        Build record from a resolved fact.

        Args:
            fact: Extracted fact with context
            company_number: Company number of the document
            filing_date: Filing date from the document name

        Returns:
            NormalizedAccountRecord
        """
        period = fact.context.period
        return cls(
            company_number=company_number,
            account=fact.local_name,
            segment_label=fact.segment_label,
            value=fact.value,
            unit=fact.unit,
            start_date=period.start_date,
            end_date=period.end_date,
            instant=period.instant,
            forever=period.is_forever(),
            filing_date=filing_date,
            context_ref=fact.context_ref,
        )

    def with_value(self, value: Optional[Union[int, str]]) -> 'NormalizedAccountRecord':
        """Copy of this record with a different value."""
        return replace(self, value=value)

    def to_row(self) -> list[Any]:
        """Values in output field order."""
        return [
            self.company_number,
            self.account,
            self.segment_label,
            self.value,
            self.unit,
            self.start_date,
            self.end_date,
            self.instant,
            self.forever,
            self.filing_date,
        ]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary keyed by output field name."""
        return dict(zip(RECORD_FIELDS, self.to_row()))


__all__ = [
    'RECORD_FIELDS',
    'NormalizedAccountRecord',
]
