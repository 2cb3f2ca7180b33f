# Path: uk_accounts/instance/__init__.py
"""
Instance Document Parsing Module

This module provides components for extracting facts from a parsed filing.

Main Components:
    - UnitParser: Builds the unit table
    - ContextParser: Builds the context table
    - FactExtractor: Finds and resolves facts for one tag
    - SegmentResolver: Attributes dimensional facts to individuals
    - decode_numeric: Scale and sign decoding
    - constants: Element names and patterns

Example:
    from ..instance import ContextParser, UnitParser, FactExtractor

    units = UnitParser().parse_units(root, ns)
    contexts = ContextParser().parse_contexts(root, ns, errors)
"""

from ..instance.tables import DocumentTables
from ..instance.context_parser import ContextParser
from ..instance.unit_parser import UnitParser
from ..instance.numeric import decode_numeric, split_leading_sign
from ..instance.segment_resolver import SegmentResolver
from ..instance.fact_extractor import FactExtractor
from ..instance import constants


__all__ = [
    'DocumentTables',
    'ContextParser',
    'UnitParser',
    'decode_numeric',
    'split_leading_sign',
    'SegmentResolver',
    'FactExtractor',
    'constants',
]
