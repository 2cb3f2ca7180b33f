# Path: uk_accounts/reporting/__init__.py
"""
Reporting Layer

Filtering, de-duplication and company data enrichment of account records.
"""

from .account_filter import (
    PeriodWindow,
    AccountDeduplicator,
    ignore_sign,
    AccountFilter,
)
from .company_registry import (
    DISSOLVED,
    ENRICHED_FIELDS,
    normalize_company_number,
    CompanyInfo,
    CompanyRegistry,
    CsvCompanyRegistry,
)

__all__ = [
    'PeriodWindow',
    'AccountDeduplicator',
    'ignore_sign',
    'AccountFilter',
    'DISSOLVED',
    'ENRICHED_FIELDS',
    'normalize_company_number',
    'CompanyInfo',
    'CompanyRegistry',
    'CsvCompanyRegistry',
]
