# Path: uk_accounts/instance/segment_resolver.py
"""
Segment Label Resolver

Attributes a fact reported under a dimensional context to the individual
behind it (the director receiving a dividend, the officer holding shares).

Filings put the officer's name in a nonNumeric fact on some context. The
figure itself may sit on the same context, or on another context that
shares the same explicit member. Resolution is:

    1. name fact on the fact's own context
    2. name fact on the first other context with the same member text
    3. no label

Both lookups go through indexes built once per document, so resolution is
a bounded dictionary walk with no recursion.

Example:
    resolver = SegmentResolver.build(tables, name_tag="bus:NameEntityOfficer")
    resolver.resolve("C1")  # 'Director A'
"""

import logging
from typing import Optional

from ..catalogue import AccountTag
from ..instance.constants import IX_NON_NUMERIC, ATTR_NAME, ATTR_CONTEXT_REF
from ..instance.tables import DocumentTables


class SegmentResolver:
    """
    One-hop segment label lookup.

    Attributes:
        names_by_context: contextRef -> first individual-name text
        contexts_by_member: member text -> context ids in document order
        member_by_context: context id -> member text
    """

    def __init__(
        self,
        names_by_context: dict[str, str],
        contexts_by_member: dict[str, list[str]],
        member_by_context: dict[str, str]
    ):
        self.names_by_context = names_by_context
        self.contexts_by_member = contexts_by_member
        self.member_by_context = member_by_context
        self.logger = logging.getLogger(__name__)

    @classmethod
    def build(cls, tables: DocumentTables, name_tag: str) -> 'SegmentResolver':
        """
        Index a document.

        Args:
            tables: Document tables
            name_tag: Individual-name tag as 'alias:LocalName'

        Returns:
            SegmentResolver (empty when the name tag's role is undeclared)
        """
        names_by_context: dict[str, str] = {}
        qualified = AccountTag.parse(name_tag).qualified(tables.ns)

        if qualified is not None:
            for elem in tables.iter_inline(IX_NON_NUMERIC):
                if elem.get(ATTR_NAME) != qualified:
                    continue
                context_ref = elem.get(ATTR_CONTEXT_REF)
                if context_ref and context_ref not in names_by_context:
                    names_by_context[context_ref] = ''.join(elem.itertext()).strip()

        contexts_by_member: dict[str, list[str]] = {}
        member_by_context: dict[str, str] = {}
        for context_id, context in tables.contexts.items():
            if context.segment is None:
                continue
            member_by_context[context_id] = context.segment.member
            contexts_by_member.setdefault(context.segment.member, []).append(context_id)

        return cls(names_by_context, contexts_by_member, member_by_context)

    def resolve(self, context_id: str) -> Optional[str]:
        """
        Individual name for a context.

        Args:
            context_id: Context of the fact

        Returns:
            Name text, or None
        """
        name = self.names_by_context.get(context_id)
        if name is not None:
            return name

        member = self.member_by_context.get(context_id)
        if member is None:
            return None

        for sibling_id in self.contexts_by_member.get(member, ()):
            if sibling_id == context_id:
                continue
            name = self.names_by_context.get(sibling_id)
            if name is not None:
                self.logger.debug(f"Context {context_id} labelled through {sibling_id}")
                return name

        return None


__all__ = ['SegmentResolver']
