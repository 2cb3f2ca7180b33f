# Path: uk_accounts/filing.py
"""
Filing Name Parser

Companies House bulk archives name each document
'<prefix>_<registered number>_<filing date>.<html|xml>'.

Example:
    name = FilingName.parse("Prod223_2285_01234567_20230331.html")
    name.registered_number  # '01234567'
    name.filing_date        # '20230331'
"""

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional

from .constants import Dialect, FILING_NAME_PATTERN


@dataclass(frozen=True)
class FilingName:
    """
    Parsed document name.

    Attributes:
        filename: Name as found in the archive
        registered_number: 8-digit number, None if the name does not match
        filing_date: YYYYMMDD string, None if the name does not match
        dialect: Dialect by suffix, None if unsupported
    """
    filename: str
    registered_number: Optional[str] = None
    filing_date: Optional[str] = None
    dialect: Optional[Dialect] = None

    @classmethod
    def parse(cls, filename: str) -> 'FilingName':
        """Parse a document name; never raises."""
        match = FILING_NAME_PATTERN.search(filename)
        return cls(
            filename=filename,
            registered_number=match.group(1) if match else None,
            filing_date=match.group(2) if match else None,
            dialect=Dialect.from_filename(filename),
        )

    @property
    def basename(self) -> str:
        """Last path component (archive entries may contain directories)."""
        return PurePosixPath(self.filename).name

    def is_supported(self) -> bool:
        """Check if the dialect is known."""
        return self.dialect is not None


__all__ = ['FilingName']
