# Path: uk_accounts/instance/tables.py
"""
Document Tables

Everything the fact extractor joins against, built once per document in
dependency order: namespaces, then units and contexts.
"""

from dataclasses import dataclass, field
from typing import Optional
from lxml import etree

from ..constants import Dialect
from ..foundation.namespace_resolver import NamespaceMap, NamespaceRole
from ..models.context import Context
from ..models.error import ErrorCollection


@dataclass
class DocumentTables:
    """
    Resolved tables of one document.

    Attributes:
        root: Document root element
        dialect: HTML or XML
        ns: Resolved namespaces
        units: Unit id -> currency code ('' for pure)
        contexts: Context id -> Context
        errors: Diagnostics collection of the document
        source_file: Document name for diagnostics
    """
    root: etree._Element
    dialect: Dialect
    ns: NamespaceMap
    units: dict[str, str] = field(default_factory=dict)
    contexts: dict[str, Context] = field(default_factory=dict)
    errors: ErrorCollection = field(default_factory=ErrorCollection)
    source_file: Optional[str] = None

    def iter_inline(self, local_name: str):
        """Iterate ix:<local_name> elements; empty when ix is undeclared."""
        tag = self.ns.clark(NamespaceRole.INLINE, local_name)
        if tag is None:
            return iter(())
        return self.root.iter(tag)


__all__ = ['DocumentTables']
