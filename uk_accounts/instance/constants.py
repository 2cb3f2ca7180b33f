# Path: uk_accounts/instance/constants.py
"""
Instance Parsing Constants

Local names and patterns used by the table builders and the fact extractor.
All namespaces are resolved per document through NamespaceMap.
"""

import re


# ==============================================================================
# UNITS
# ==============================================================================

ISO4217_PREFIX = 'iso4217:'
PURE_MEASURE = 'pure'


# ==============================================================================
# INLINE XBRL ELEMENTS
# ==============================================================================

IX_NON_FRACTION = 'nonFraction'
IX_NON_NUMERIC = 'nonNumeric'

ATTR_NAME = 'name'
ATTR_CONTEXT_REF = 'contextRef'
ATTR_UNIT_REF = 'unitRef'
ATTR_DECIMALS = 'decimals'
ATTR_FORMAT = 'format'
ATTR_SCALE = 'scale'
ATTR_SIGN = 'sign'


# ==============================================================================
# NUMERIC DECODING
# ==============================================================================

NUMERIC_TEXT_PATTERN = re.compile(r'^[\d,]+$')
SCALE_PATTERN = re.compile(r'^\d{1,2}$')
MAX_NUMERIC_DIGITS = 100
NEGATIVE_SIGN = '-'


__all__ = [
    'ISO4217_PREFIX',
    'PURE_MEASURE',
    'IX_NON_FRACTION',
    'IX_NON_NUMERIC',
    'ATTR_NAME',
    'ATTR_CONTEXT_REF',
    'ATTR_UNIT_REF',
    'ATTR_DECIMALS',
    'ATTR_FORMAT',
    'ATTR_SCALE',
    'ATTR_SIGN',
    'NUMERIC_TEXT_PATTERN',
    'SCALE_PATTERN',
    'MAX_NUMERIC_DIGITS',
    'NEGATIVE_SIGN',
]
