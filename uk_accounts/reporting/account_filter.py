# Path: uk_accounts/reporting/account_filter.py
"""
Account Filter

Consumer-side refinement of extracted records.

This module handles:
- Reporting-period windows (strictly between two dates)
- De-duplication per (company, account, context), first record wins
- Sign stripping for figures reported negative by presentation

The extractor reports a fact once per discovery strategy that finds it.
De-duplication belongs here, where the caller decides whether it wants it.

Example:
    record_filter = AccountFilter(
        window=PeriodWindow("2017-12-31", "2019-01-01"),
        deduplicator=AccountDeduplicator(errors),
        ignore_sign=True,
    )
    kept = record_filter.apply(records)
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from ..core.logger import get_process_logger
from ..models.error import ErrorCollection, ErrorCategory
from ..models.record import NormalizedAccountRecord


logger = get_process_logger('account_filter')


@dataclass(frozen=True)
class PeriodWindow:
    """
    Open date interval.

    Dates compare as strings, so both bounds must use the document
    spelling (ISO 'YYYY-MM-DD' in practice).

    Attributes:
        start: Exclusive lower bound
        end: Exclusive upper bound
        compare_instant: Compare instant instead of end_date
    """
    start: str
    end: str
    compare_instant: bool = False

    def contains(self, record: NormalizedAccountRecord) -> bool:
        """Check if the record's date lies strictly inside the window."""
        value = record.instant if self.compare_instant else record.end_date
        if value is None:
            return False
        return self.start < value < self.end


class AccountDeduplicator:
    """
    Keeps the first record per (company, account, context).

    Every later record with the same key is dropped and reported as
    DUPLICATE_ENTRY.

    Example:
        dedupe = AccountDeduplicator(errors)
        unique = list(dedupe.filter(records))
    """

    def __init__(self, errors: Optional[ErrorCollection] = None):
        self.errors = errors if errors is not None else ErrorCollection()
        self._seen: set[tuple] = set()

    def key(self, record: NormalizedAccountRecord) -> tuple:
        return (record.company_number, record.account, record.context_ref)

    def accept(self, record: NormalizedAccountRecord) -> bool:
        """
        Check and remember a record.

        Returns:
            True for the first record of its key
        """
        key = self.key(record)
        if key in self._seen:
            self.errors.report_warning(
                ErrorCategory.DUPLICATE_ENTRY,
                f"Duplicate entry: registered_number: '{record.company_number}', "
                f"account: '{record.account}', contextRef: '{record.context_ref}', "
                f"value: '{record.value}'",
                element_id=record.context_ref,
            )
            return False

        self._seen.add(key)
        return True

    def filter(
        self,
        records: Iterable[NormalizedAccountRecord]
    ) -> Iterator[NormalizedAccountRecord]:
        """Yield records accepted by accept()."""
        for record in records:
            if self.accept(record):
                yield record

    def reset(self) -> None:
        """Forget all seen keys."""
        self._seen.clear()


def ignore_sign(record: NormalizedAccountRecord) -> NormalizedAccountRecord:
    """
    Record with the absolute value of a numeric figure.

    Textual and undecodable values pass through unchanged.
    """
    if isinstance(record.value, int) and record.value < 0:
        return record.with_value(-record.value)
    return record


class AccountFilter:
    """
    Window, de-duplication and sign handling in one pass.

    Any part left unset is skipped. Order: window, de-duplication, sign.
    """

    def __init__(
        self,
        window: Optional[PeriodWindow] = None,
        deduplicator: Optional[AccountDeduplicator] = None,
        ignore_sign: bool = False
    ):
        self.window = window
        self.deduplicator = deduplicator
        self.ignore_sign = ignore_sign

    def apply(
        self,
        records: Iterable[NormalizedAccountRecord]
    ) -> list[NormalizedAccountRecord]:
        """
        Filter records.

        Args:
            records: Extracted records

        Returns:
            list of kept records, input order
        """
        kept = []
        dropped_by_window = 0

        for record in records:
            if self.window is not None and not self.window.contains(record):
                dropped_by_window += 1
                continue
            if self.deduplicator is not None and not self.deduplicator.accept(record):
                continue
            kept.append(ignore_sign(record) if self.ignore_sign else record)

        if dropped_by_window:
            logger.debug(f"{dropped_by_window} records outside {self.window}")

        return kept

    def is_noop(self) -> bool:
        """Check if the filter keeps every record unchanged."""
        return self.window is None and self.deduplicator is None and not self.ignore_sign


__all__ = [
    'PeriodWindow',
    'AccountDeduplicator',
    'ignore_sign',
    'AccountFilter',
]
