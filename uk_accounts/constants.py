# Path: uk_accounts/constants.py
"""
Constants for uk_accounts

Patterns and names shared across the package.
Follows the no-hardcoded-values principle.
"""

import re
from enum import Enum
from typing import Optional


# ============================================================================
# DOCUMENT DIALECTS
# ============================================================================

class Dialect(Enum):
    """
    Document dialect, selected by filename suffix.

    Dialects:
        HTML: Inline XBRL (XHTML with ix:* facts)
        XML: Plain XBRL instance
    """
    HTML = "html"
    XML = "xml"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_filename(cls, filename: str) -> Optional['Dialect']:
        """Dialect for filename, None when unsupported."""
        lowered = filename.lower()
        if lowered.endswith('.html'):
            return cls.HTML
        if lowered.endswith('.xml'):
            return cls.XML
        return None


# ============================================================================
# FILING NAMES
# ============================================================================

# Prod223_2285_01234567_20230331.html -> number 01234567, filed 20230331
FILING_NAME_PATTERN = re.compile(r'_(\d{8})_(\d{8})\.(?:html|xml)$', re.IGNORECASE)

COMPANY_NUMBER_LENGTH = 8


# ============================================================================
# COMPANY NUMBER TAGS
# ============================================================================

HTML_COMPANY_NUMBER_TAG = 'UKCompaniesHouseRegisteredNumber'
XML_COMPANY_NUMBER_TAG = 'CompaniesHouseRegisteredNumber'


# ============================================================================
# BATCH PROCESSING
# ============================================================================

ARCHIVE_GLOB = '*.zip'
PROGRESS_SUFFIX = '.progress.json'
NOTHING_PROCESSED = -1

OUTPUT_BASENAME = 'accounts'


# ============================================================================
# CONSOLE OUTPUT
# ============================================================================

MENU_WIDTH = 60
MENU_SEPARATOR = '-' * MENU_WIDTH
MENU_HEADER = '=' * MENU_WIDTH

STATUS_OK = '[OK]'
STATUS_FAIL = '[FAIL]'
STATUS_INFO = '[INFO]'


__all__ = [
    'Dialect',
    'FILING_NAME_PATTERN',
    'COMPANY_NUMBER_LENGTH',
    'HTML_COMPANY_NUMBER_TAG',
    'XML_COMPANY_NUMBER_TAG',
    'ARCHIVE_GLOB',
    'PROGRESS_SUFFIX',
    'NOTHING_PROCESSED',
    'OUTPUT_BASENAME',
    'MENU_WIDTH',
    'MENU_SEPARATOR',
    'MENU_HEADER',
    'STATUS_OK',
    'STATUS_FAIL',
    'STATUS_INFO',
]
