# Path: uk_accounts/instance/fact_extractor.py
"""
Fact Extractor

Finds the facts for one tag and resolves them against the document tables.

This module handles:
- By-element discovery (ix:nonFraction / ix:nonNumeric @name, or XML tag)
- By-dimension discovery (contexts whose explicit member names the tag)
- Context and unit reference resolution
- Numeric decoding (scale, sign, thousands separators)
- Segment label resolution for iXBRL

Both discovery strategies run for every request and their results are
concatenated in that order. A fact found by both appears twice; callers
that need one record per (tag, context) de-duplicate downstream.

Every dropped fact leaves one diagnostic. Nothing here raises on document
content.

Example:
    extractor = FactExtractor()
    facts = extractor.extract(tables, "core:DividendsPaid", is_numeric=True)

    for fact in facts:
        print(f"{fact.name}: {fact.value} {fact.unit}")
"""

import logging
from typing import Optional
from lxml import etree

from ..config_loader import ConfigLoader
from ..constants import Dialect
from ..models.context import Context
from ..models.error import ErrorCategory
from ..models.fact import Fact, FactSource
from ..instance.constants import (
    IX_NON_FRACTION,
    IX_NON_NUMERIC,
    ATTR_NAME,
    ATTR_CONTEXT_REF,
    ATTR_UNIT_REF,
    ATTR_DECIMALS,
    ATTR_FORMAT,
    ATTR_SCALE,
    ATTR_SIGN,
)
from ..instance.numeric import decode_numeric, split_leading_sign
from ..instance.segment_resolver import SegmentResolver
from ..instance.tables import DocumentTables


class FactExtractor:
    """
    Extracts facts for catalogue tags.

    Example:
        extractor = FactExtractor()
        facts = extractor.extract(tables, "core:FixedAssets", True, resolver)

        by_dimension = [f for f in facts if f.source == FactSource.DIMENSION]
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize fact extractor.

        Args:
            config: Configuration loader
        """
        self.config = config or ConfigLoader()
        self.logger = logging.getLogger(__name__)
        self.logger.debug("FactExtractor initialized")

    def extract(
        self,
        tables: DocumentTables,
        tag: str,
        is_numeric: bool,
        segment_resolver: Optional[SegmentResolver] = None
    ) -> list[Fact]:
        """
        Extract all facts for a tag.

        Args:
            tables: Document tables
            tag: Tag as written in the document (e.g. 'core:DividendsPaid')
            is_numeric: Numeric (nonFraction) or textual (nonNumeric) request
            segment_resolver: Label resolver (iXBRL only)

        Returns:
            Facts found by element, followed by facts found by dimension
        """
        facts = self.extract_by_element(tables, tag, is_numeric)
        facts.extend(self.extract_by_dimension(tables, tag, is_numeric))

        if segment_resolver is not None and tables.dialect == Dialect.HTML:
            for fact in facts:
                fact.segment_label = segment_resolver.resolve(fact.context_ref)

        self.logger.debug(f"{tag}: {len(facts)} facts")
        return facts

    # ==========================================================================
    # DISCOVERY
    # ==========================================================================

    def extract_by_element(
        self,
        tables: DocumentTables,
        tag: str,
        is_numeric: bool
    ) -> list[Fact]:
        """
        Facts whose element names the tag.

        Args:
            tables: Document tables
            tag: Tag as written in the document
            is_numeric: Numeric or textual request

        Returns:
            list of resolved facts
        """
        facts = []

        for elem in self._element_candidates(tables, tag, is_numeric):
            fact = self._build_fact(tables, elem, tag, is_numeric, FactSource.ELEMENT)
            if fact is not None:
                facts.append(fact)

        return facts

    def extract_by_dimension(
        self,
        tables: DocumentTables,
        tag: str,
        is_numeric: bool
    ) -> list[Fact]:
        """
        Facts reported on contexts whose explicit member contains the tag.

        For each such context the first fact of the requested kind carrying
        that contextRef is taken, whatever its name. In plain XBRL a fact
        is numeric when it carries a unitRef.

        Args:
            tables: Document tables
            tag: Tag as written in the document
            is_numeric: Numeric or textual request

        Returns:
            list of resolved facts
        """
        facts = []
        if tables.dialect == Dialect.HTML:
            kind = IX_NON_FRACTION if is_numeric else IX_NON_NUMERIC
        else:
            kind = 'numeric' if is_numeric else 'textual'

        for context_id, context in tables.contexts.items():
            if context.segment is None or tag not in context.segment.member:
                continue

            elem = self._first_fact_on_context(tables, is_numeric, context_id)
            if elem is None:
                tables.errors.report_warning(
                    ErrorCategory.MISSING_FACT,
                    f"No {kind} fact for context {context_id} (member {context.segment.member})",
                    element_id=context_id,
                    source_file=tables.source_file,
                )
                continue

            fact = self._build_fact(tables, elem, tag, is_numeric, FactSource.DIMENSION)
            if fact is not None:
                facts.append(fact)

        return facts

    def _element_candidates(
        self,
        tables: DocumentTables,
        tag: str,
        is_numeric: bool
    ) -> list[etree._Element]:
        """Elements naming the tag in the document's dialect."""
        if tables.dialect == Dialect.HTML:
            kind = IX_NON_FRACTION if is_numeric else IX_NON_NUMERIC
            return [e for e in tables.iter_inline(kind) if e.get(ATTR_NAME) == tag]

        clark = tables.ns.resolve_qname(tag)
        if clark is None:
            return []
        return list(tables.root.iter(clark))

    def _first_fact_on_context(
        self,
        tables: DocumentTables,
        is_numeric: bool,
        context_id: str
    ) -> Optional[etree._Element]:
        """First fact element of the requested kind with contextRef == context_id."""
        if tables.dialect == Dialect.HTML:
            kind = IX_NON_FRACTION if is_numeric else IX_NON_NUMERIC
            candidates = tables.iter_inline(kind)
        else:
            candidates = (
                e for e in tables.root.iter(etree.Element)
                if (e.get(ATTR_UNIT_REF) is not None) == is_numeric
            )

        for elem in candidates:
            if elem.get(ATTR_CONTEXT_REF) == context_id:
                return elem
        return None

    # ==========================================================================
    # RESOLUTION
    # ==========================================================================

    def _build_fact(
        self,
        tables: DocumentTables,
        elem: etree._Element,
        tag: str,
        is_numeric: bool,
        source: FactSource
    ) -> Optional[Fact]:
        """
        Resolve references and decode one element.

        Args:
            tables: Document tables
            elem: Fact element
            tag: Requested tag
            is_numeric: Numeric or textual request
            source: Discovery strategy

        Returns:
            Fact, or None when a reference does not resolve
        """
        context_ref = elem.get(ATTR_CONTEXT_REF)
        context = self._resolve_context(tables, context_ref, tag)
        if context is None:
            return None

        unit_ref = elem.get(ATTR_UNIT_REF)
        unit = None
        if is_numeric:
            unit = self._resolve_unit(tables, unit_ref, tag)
            if unit is None:
                return None

        fact = Fact(
            name=tag,
            context_ref=context_ref,
            text=''.join(elem.itertext()),
            is_numeric=is_numeric,
            context=context,
            source=source,
            unit_ref=unit_ref,
            unit=unit,
            decimals=elem.get(ATTR_DECIMALS),
            format=elem.get(ATTR_FORMAT),
            scale=elem.get(ATTR_SCALE),
            sign=elem.get(ATTR_SIGN),
        )

        if is_numeric:
            fact.value = self._decode(tables, fact)
        else:
            fact.value = fact.text.strip()

        return fact

    def _resolve_context(
        self,
        tables: DocumentTables,
        context_ref: Optional[str],
        tag: str
    ) -> Optional[Context]:
        """Context for a contextRef, MISSING_CONTEXT diagnostic when absent."""
        context = tables.contexts.get(context_ref) if context_ref else None
        if context is None:
            tables.errors.report_warning(
                ErrorCategory.MISSING_CONTEXT,
                f"No context for '{context_ref}' ({tag})",
                element_id=context_ref,
                source_file=tables.source_file,
            )
        return context

    def _resolve_unit(
        self,
        tables: DocumentTables,
        unit_ref: Optional[str],
        tag: str
    ) -> Optional[str]:
        """Unit code for a unitRef, MISSING_UNIT diagnostic when absent."""
        unit = tables.units.get(unit_ref) if unit_ref else None
        if unit is None:
            tables.errors.report_warning(
                ErrorCategory.MISSING_UNIT,
                f"No unit for '{unit_ref}' ({tag})",
                element_id=unit_ref,
                source_file=tables.source_file,
            )
        return unit

    def _decode(self, tables: DocumentTables, fact: Fact) -> Optional[int]:
        """Decode numeric text; plain XML carries the sign in the text."""
        text, sign = fact.text, fact.sign

        if tables.dialect == Dialect.XML:
            text, leading_sign = split_leading_sign(text)
            if leading_sign is not None:
                sign = leading_sign
                fact.sign = leading_sign

        return decode_numeric(
            text,
            scale=fact.scale,
            sign=sign,
            errors=tables.errors,
            element_id=f"{fact.name}@{fact.context_ref}",
            source_file=tables.source_file,
        )


__all__ = ['FactExtractor']
