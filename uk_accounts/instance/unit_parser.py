# Path: uk_accounts/instance/unit_parser.py
"""
Unit Parser

Builds the unit table of a document: unit id -> currency code.

This module handles:
- Unit element extraction through the instance namespace role
- Direct-child measure reading, whitespace removed
- ISO 4217 currency code handling ('iso4217:GBP' -> 'GBP')
- Dimensionless 'pure' units ('' code)

Divide units and any other measure are left out of the table. A fact that
refers to them is then dropped with MISSING_UNIT by the fact extractor.

Example:
    parser = UnitParser()
    units = parser.parse_units(root, ns)

    units['U1']  # 'GBP'
"""

import logging
import re
from typing import Optional
from lxml import etree

from ..config_loader import ConfigLoader
from ..foundation.namespace_resolver import NamespaceMap, NamespaceRole
from ..instance.constants import ISO4217_PREFIX, PURE_MEASURE


WHITESPACE = re.compile(r'\s')


class UnitParser:
    """
    Parses unit elements into a unit table.

    Example:
        parser = UnitParser()
        units = parser.parse_units(root, ns)

        for unit_id, code in units.items():
            print(f"{unit_id}: {code or 'pure'}")
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize unit parser.

        Args:
            config: Configuration loader
        """
        self.config = config or ConfigLoader()
        self.logger = logging.getLogger(__name__)
        self.logger.debug("UnitParser initialized")

    def parse_units(self, root: etree._Element, ns: NamespaceMap) -> dict[str, str]:
        """
        Parse all unit elements of a document.

        Args:
            root: Document root element
            ns: Resolved namespaces

        Returns:
            Dictionary mapping unit IDs to currency code ('' for pure)
        """
        units: dict[str, str] = {}

        unit_tag = ns.clark(NamespaceRole.INSTANCE, 'unit')
        measure_tag = ns.clark(NamespaceRole.INSTANCE, 'measure')
        if unit_tag is None:
            self.logger.debug("No instance namespace, unit table is empty")
            return units

        pure_measure = self._pure_measure(ns)

        for unit_elem in root.iter(unit_tag):
            unit_id = unit_elem.get('id')
            if not unit_id:
                self.logger.warning("Unit element missing 'id' attribute")
                continue

            code = self._classify_measure(unit_elem.find(measure_tag), pure_measure)
            if code is None:
                self.logger.debug(f"Unit {unit_id} is neither currency nor pure, skipped")
                continue

            units[unit_id] = code

        self.logger.debug(f"Parsed {len(units)} units")
        return units

    def _classify_measure(
        self,
        measure_elem: Optional[etree._Element],
        pure_measure: str
    ) -> Optional[str]:
        """
        Turn a measure element into a unit code.

        Args:
            measure_elem: Direct-child measure element (None for divide units)
            pure_measure: Spelling of pure in this document

        Returns:
            Currency code, '' for pure, None otherwise
        """
        if measure_elem is None or measure_elem.text is None:
            return None

        measure = WHITESPACE.sub('', measure_elem.text)

        if measure.startswith(ISO4217_PREFIX) and len(measure) > len(ISO4217_PREFIX):
            return measure[len(ISO4217_PREFIX):]

        if measure == pure_measure:
            return ''

        return None

    def _pure_measure(self, ns: NamespaceMap) -> str:
        """'xbrli:pure', or 'pure' when instance is the default namespace."""
        return ns.qualified(NamespaceRole.INSTANCE, PURE_MEASURE)


__all__ = ['UnitParser']
