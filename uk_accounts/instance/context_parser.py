# Path: uk_accounts/instance/context_parser.py
"""
Context Parser

Builds the context table of a document: context id -> Context.

This module handles:
- Context element extraction through the instance namespace role
- Period parsing (duration, instant, forever, unknown)
- First explicit member of the entity segment

Period rules, checked in order:
    startDate and endDate -> DURATION
    startDate alone       -> UNKNOWN, INVALID_PERIOD diagnostic naming endDate
    instant               -> INSTANT
    forever               -> FOREVER
    otherwise             -> UNKNOWN

Example:
    parser = ContextParser()
    contexts = parser.parse_contexts(root, ns, errors)

    for ctx_id, ctx in contexts.items():
        print(f"{ctx_id}: {ctx.period.get_label()}")
"""

import logging
import re
from typing import Optional
from lxml import etree

from ..config_loader import ConfigLoader
from ..foundation.namespace_resolver import NamespaceMap, NamespaceRole
from ..models.context import (
    Context,
    ExplicitMember,
    Period,
    PeriodType,
    UNKNOWN_PERIOD,
)
from ..models.error import ErrorCollection, ErrorCategory


WHITESPACE = re.compile(r'\s')


class ContextParser:
    """
    Parses context elements into a context table.

    Repeated context ids overwrite earlier ones (last write wins).

    Example:
        parser = ContextParser()
        contexts = parser.parse_contexts(root, ns, errors)

        ctx = contexts['C1']
        print(f"Period: {ctx.period.get_label()}")
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize context parser.

        Args:
            config: Configuration loader
        """
        self.config = config or ConfigLoader()
        self.logger = logging.getLogger(__name__)
        self.logger.debug("ContextParser initialized")

    def parse_contexts(
        self,
        root: etree._Element,
        ns: NamespaceMap,
        errors: ErrorCollection,
        source_file: Optional[str] = None
    ) -> dict[str, Context]:
        """
        Parse all context elements of a document.

        Args:
            root: Document root element
            ns: Resolved namespaces
            errors: Diagnostics collection
            source_file: Document name for diagnostics

        Returns:
            Dictionary mapping context IDs to Context objects
        """
        contexts: dict[str, Context] = {}

        context_tag = ns.clark(NamespaceRole.INSTANCE, 'context')
        if context_tag is None:
            self.logger.debug("No instance namespace, context table is empty")
            return contexts

        for ctx_elem in root.iter(context_tag):
            context_id = ctx_elem.get('id')
            if not context_id:
                self.logger.warning("Context element missing 'id' attribute")
                continue

            if context_id in contexts:
                self.logger.warning(f"Duplicate context id {context_id}, keeping the last one")

            contexts[context_id] = Context(
                id=context_id,
                period=self._parse_period(ctx_elem, ns, errors, context_id, source_file),
                segment=self._parse_segment(ctx_elem, ns),
            )

        self.logger.debug(f"Parsed {len(contexts)} contexts")
        return contexts

    def _parse_period(
        self,
        ctx_elem: etree._Element,
        ns: NamespaceMap,
        errors: ErrorCollection,
        context_id: str,
        source_file: Optional[str]
    ) -> Period:
        """
        Parse period element from context.

        Args:
            ctx_elem: Context XML element
            ns: Resolved namespaces
            errors: Diagnostics collection
            context_id: Context id for diagnostics
            source_file: Document name for diagnostics

        Returns:
            Period (UNKNOWN_PERIOD when nothing usable is present)
        """
        period_elem = ctx_elem.find(ns.clark(NamespaceRole.INSTANCE, 'period'))
        if period_elem is None:
            return UNKNOWN_PERIOD

        start_date = self._child_text(period_elem, ns, 'startDate')
        end_date = self._child_text(period_elem, ns, 'endDate')

        if start_date is not None:
            if end_date is not None:
                return Period(
                    period_type=PeriodType.DURATION,
                    start_date=start_date,
                    end_date=end_date
                )

            errors.report_warning(
                ErrorCategory.INVALID_PERIOD,
                f"Context {context_id} has startDate but no endDate",
                element_id=context_id,
                source_file=source_file,
            )
            return UNKNOWN_PERIOD

        instant = self._child_text(period_elem, ns, 'instant')
        if instant is not None:
            return Period(period_type=PeriodType.INSTANT, instant=instant)

        if period_elem.find(ns.clark(NamespaceRole.INSTANCE, 'forever')) is not None:
            return Period(period_type=PeriodType.FOREVER)

        return UNKNOWN_PERIOD

    def _parse_segment(
        self,
        ctx_elem: etree._Element,
        ns: NamespaceMap
    ) -> Optional[ExplicitMember]:
        """
        Parse first explicit member of entity/segment.

        Args:
            ctx_elem: Context XML element
            ns: Resolved namespaces

        Returns:
            ExplicitMember or None
        """
        member_tag = ns.clark(NamespaceRole.DIMENSIONS, 'explicitMember')
        if member_tag is None:
            return None

        entity_elem = ctx_elem.find(ns.clark(NamespaceRole.INSTANCE, 'entity'))
        if entity_elem is None:
            return None

        segment_elem = entity_elem.find(ns.clark(NamespaceRole.INSTANCE, 'segment'))
        if segment_elem is None:
            return None

        member_elem = segment_elem.find(member_tag)
        if member_elem is None:
            return None

        return ExplicitMember(
            member=WHITESPACE.sub('', member_elem.text or ''),
            dimension=member_elem.get('dimension'),
        )

    def _child_text(
        self,
        parent: etree._Element,
        ns: NamespaceMap,
        local_name: str
    ) -> Optional[str]:
        """Whitespace-free text of a direct child, None if the child is absent."""
        child = parent.find(ns.clark(NamespaceRole.INSTANCE, local_name))
        if child is None:
            return None
        return WHITESPACE.sub('', child.text or '')


__all__ = ['ContextParser']
