# Path: uk_accounts/models/fact.py
"""
Fact Data Model

Extracted fact representation with resolved context and unit.

This module defines:
- FactSource enum (which discovery strategy found the fact)
- Fact dataclass (raw attributes plus decoded value)
"""

from dataclasses import dataclass
from typing import Any, Optional, Union
from enum import Enum

from ..models.context import Context


# ==============================================================================
# FACT SOURCE
# ==============================================================================

class FactSource(Enum):
    """
    Discovery strategy classification.

    Sources:
        ELEMENT: Found by element name (ix:nonFraction/@name or XML tag)
        DIMENSION: Found through a context whose segment member names the tag
    """
    ELEMENT = "ELEMENT"
    DIMENSION = "DIMENSION"

    def __str__(self) -> str:
        return self.value


# ==============================================================================
# FACT DATA MODEL
# ==============================================================================

@dataclass
class Fact:
    """
    Extracted fact.

    Core Attributes:
        name: Qualified tag requested (e.g., 'core:DividendsPaid')
        context_ref: Reference to context ID
        unit_ref: Reference to unit ID (numeric facts only)
        text: Raw text of the element

    iXBRL Attributes:
        decimals: decimals attribute
        format: format attribute (e.g., 'ixt:numdotdecimal')
        scale: scale attribute, power of ten
        sign: sign attribute ('-' negates)

    Resolved:
        is_numeric: True for nonFraction/numeric requests
        value: int for numeric facts, str for textual, None if undecodable
        context: Resolved Context
        unit: Resolved unit code ('' for pure)
        source: Discovery strategy
        segment_label: Resolved individual name, if any
    """
    name: str
    context_ref: str
    text: str
    is_numeric: bool
    context: Context
    source: FactSource = FactSource.ELEMENT
    unit_ref: Optional[str] = None
    unit: Optional[str] = None
    decimals: Optional[str] = None
    format: Optional[str] = None
    scale: Optional[str] = None
    sign: Optional[str] = None
    value: Optional[Union[int, str]] = None
    segment_label: Optional[str] = None

    @property
    def local_name(self) -> str:
        """Tag name without its prefix."""
        return self.name.split(':', 1)[-1]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            'name': self.name,
            'context_ref': self.context_ref,
            'unit_ref': self.unit_ref,
            'text': self.text,
            'decimals': self.decimals,
            'format': self.format,
            'scale': self.scale,
            'sign': self.sign,
            'is_numeric': self.is_numeric,
            'value': self.value,
            'unit': self.unit,
            'source': self.source.value,
            'segment_label': self.segment_label,
            'context': self.context.to_dict(),
        }


__all__ = [
    'FactSource',
    'Fact',
]
