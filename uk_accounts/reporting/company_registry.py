# Path: uk_accounts/reporting/company_registry.py
"""
Company Registry

Enriches account records with Companies House company data.

This module handles:
- Registered number normalization (zero-padded to eight characters)
- Loading the "Basic Company Data" CSV published by Companies House
- Adding country of origin and account category to records

Companies missing from the registry are reported as 'Dissolved', the
register only lists live companies.

Example:
    registry = CsvCompanyRegistry.load(Path("BasicCompanyData.csv"))
    row = registry.enrich(record)
    row['account_category']  # 'MICRO ENTITY'
"""

import csv
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from ..constants import COMPANY_NUMBER_LENGTH
from ..core.logger import get_input_logger
from ..models.record import NormalizedAccountRecord, RECORD_FIELDS


logger = get_input_logger('company_registry')

DISSOLVED = 'Dissolved'

ENRICHED_FIELDS: tuple[str, ...] = RECORD_FIELDS + ('country_origin', 'account_category')

# Column names of the Companies House bulk CSV (headers carry a leading space)
COLUMN_COMPANY_NUMBER = 'CompanyNumber'
COLUMN_COUNTRY_OF_ORIGIN = 'CountryOfOrigin'
COLUMN_ACCOUNT_CATEGORY = 'Accounts.AccountCategory'

COMPANY_NUMBER_PATTERN = re.compile(r'^[0-9A-Za-z]{1,8}$')


def normalize_company_number(number: Optional[str]) -> Optional[str]:
    """
    Zero-pad a registered number to eight characters.

    Args:
        number: Raw number ('144147', 'SC123456')

    Returns:
        Normalized number, or None when it cannot be a registered number
    """
    if number is None:
        return None
    number = str(number).strip()
    if not COMPANY_NUMBER_PATTERN.match(number):
        return None
    return number.rjust(COMPANY_NUMBER_LENGTH, '0')


@dataclass(frozen=True)
class CompanyInfo:
    """
    Registry entry.

    Attributes:
        country_origin: CountryOfOrigin column
        account_category: Accounts.AccountCategory column
    """
    country_origin: Optional[str] = None
    account_category: Optional[str] = None


class CompanyRegistry:
    """
    Lookup of company data by registered number.

    Example:
        registry = CompanyRegistry({'00144147': CompanyInfo('United Kingdom', 'FULL')})
        registry.lookup('144147').account_category  # 'FULL'
    """

    def __init__(self, companies: Optional[dict[str, CompanyInfo]] = None):
        self.companies: dict[str, CompanyInfo] = {}
        for number, info in (companies or {}).items():
            self.add(number, info)

    def add(self, number: str, info: CompanyInfo) -> None:
        """Register a company; malformed numbers are skipped."""
        key = normalize_company_number(number)
        if key is None:
            logger.debug(f"Skipping malformed company number {number!r}")
            return
        self.companies[key] = info

    def lookup(self, number: Optional[str]) -> Optional[CompanyInfo]:
        """Company data, or None when unknown."""
        key = normalize_company_number(number)
        if key is None:
            return None
        return self.companies.get(key)

    def enrich(
        self,
        record: Union[NormalizedAccountRecord, dict[str, Any]]
    ) -> dict[str, Any]:
        """
        Record as a dictionary with registry columns added.

        Args:
            record: Account record

        Returns:
            Dictionary keyed by ENRICHED_FIELDS
        """
        row = record.to_dict() if isinstance(record, NormalizedAccountRecord) else dict(record)
        info = self.lookup(row.get('registered_number'))

        if info is None:
            row['country_origin'] = None
            row['account_category'] = DISSOLVED
        else:
            row['country_origin'] = info.country_origin
            row['account_category'] = info.account_category or DISSOLVED

        return row

    def __len__(self) -> int:
        return len(self.companies)


class CsvCompanyRegistry(CompanyRegistry):
    """Registry loaded from the Companies House basic company data CSV."""

    @classmethod
    def load(cls, path: Path) -> 'CsvCompanyRegistry':
        """
        Load a registry file.

        Args:
            path: CSV file with CompanyNumber, CountryOfOrigin and
                Accounts.AccountCategory columns

        Returns:
            CsvCompanyRegistry

        Raises:
            FileNotFoundError: If path does not exist
            ValueError: If the CompanyNumber column is missing
        """
        registry = cls()

        with open(path, encoding='utf-8-sig', newline='') as f:
            reader = csv.DictReader(f)
            columns = {name.strip(): name for name in (reader.fieldnames or [])}

            if COLUMN_COMPANY_NUMBER not in columns:
                raise ValueError(f"{path} has no {COLUMN_COMPANY_NUMBER} column")

            number_column = columns[COLUMN_COMPANY_NUMBER]
            country_column = columns.get(COLUMN_COUNTRY_OF_ORIGIN)
            category_column = columns.get(COLUMN_ACCOUNT_CATEGORY)

            for row in reader:
                registry.add(
                    row.get(number_column, ''),
                    CompanyInfo(
                        country_origin=_clean(row.get(country_column)) if country_column else None,
                        account_category=_clean(row.get(category_column)) if category_column else None,
                    )
                )

        logger.info(f"Loaded {len(registry)} companies from {path}")
        return registry


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


__all__ = [
    'DISSOLVED',
    'ENRICHED_FIELDS',
    'normalize_company_number',
    'CompanyInfo',
    'CompanyRegistry',
    'CsvCompanyRegistry',
]
