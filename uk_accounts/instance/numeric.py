# Path: uk_accounts/instance/numeric.py
"""
Numeric Decoding

Turns the displayed text of a numeric fact into an integer.

This module handles:
- Thousands separators ("1,234" -> 1234)
- scale attribute (power of ten multiplier, at most two digits)
- sign attribute ('-' negates, '' is a no-op)
- Leading minus of plain XML facts

Malformed scale or sign attributes are reported and ignored; the value
is still returned without that transformation. Digit strings longer than
MAX_NUMERIC_DIGITS are reported and decode to None.

Example:
    decode_numeric("1,234", scale="2", sign="-", errors=errors)  # -123400
    decode_numeric("n/a", errors=errors)                        # None
"""

import re
from typing import Optional

from ..models.error import ErrorCollection, ErrorCategory
from ..instance.constants import (
    NUMERIC_TEXT_PATTERN,
    SCALE_PATTERN,
    MAX_NUMERIC_DIGITS,
    NEGATIVE_SIGN,
)


WHITESPACE = re.compile(r'\s')


def decode_numeric(
    text: Optional[str],
    scale: Optional[str] = None,
    sign: Optional[str] = None,
    errors: Optional[ErrorCollection] = None,
    element_id: Optional[str] = None,
    source_file: Optional[str] = None
) -> Optional[int]:
    """
    Decode displayed numeric text with scale and sign.

    Args:
        text: Displayed text (digits and commas)
        scale: scale attribute, None when absent
        sign: sign attribute, None when absent
        errors: Diagnostics collection for malformed attributes
        element_id: Fact identification for diagnostics
        source_file: Document name for diagnostics

    Returns:
        Decoded integer, or None when text is not digits and commas
        or has too many digits
    """
    if text is None:
        return None

    text = WHITESPACE.sub('', text)
    if not NUMERIC_TEXT_PATTERN.match(text):
        return None

    digits = text.replace(',', '')
    if not digits:
        return None
    if len(digits) > MAX_NUMERIC_DIGITS:
        if errors is not None:
            errors.report_warning(
                ErrorCategory.INVALID_VALUE,
                f"Invalid format: {len(digits)} digits",
                element_id=element_id,
                source_file=source_file,
            )
        return None

    number = int(digits)

    if scale is not None:
        if SCALE_PATTERN.match(scale):
            number *= 10 ** int(scale)
        elif errors is not None:
            errors.report_warning(
                ErrorCategory.INVALID_SCALE,
                f"Invalid format: scale='{scale}'",
                element_id=element_id,
                source_file=source_file,
            )

    if sign is not None:
        if sign == NEGATIVE_SIGN:
            number = -number
        elif sign != '' and errors is not None:
            errors.report_warning(
                ErrorCategory.INVALID_SIGN,
                f"Invalid format: sign='{sign}'",
                element_id=element_id,
                source_file=source_file,
            )

    return number


def split_leading_sign(text: Optional[str]) -> tuple[Optional[str], Optional[str]]:
    """
    Separate a leading minus from plain XML numeric text.

    Args:
        text: Element text

    Returns:
        (text without the minus, '-' or None)

    Example:
        split_leading_sign(" -1,000 ")  # ('1,000', '-')
    """
    if text is None:
        return None, None

    stripped = text.strip()
    if stripped.startswith(NEGATIVE_SIGN):
        return stripped[1:], NEGATIVE_SIGN
    return stripped, None


__all__ = ['decode_numeric', 'split_leading_sign']
