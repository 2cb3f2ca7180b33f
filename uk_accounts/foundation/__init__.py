# Path: uk_accounts/foundation/__init__.py
"""
Foundation layer components.

Core infrastructure for XML parsing and namespace role resolution.
"""

from ..foundation.xml_parser import XMLParser, XMLParseResult
from ..foundation.namespace_resolver import (
    NamespaceRole,
    NamespaceBinding,
    NamespaceMap,
    NamespaceResolver,
    ROLE_ALIASES,
    classify_uri,
)

__all__ = [
    # XML parsing
    'XMLParser',
    'XMLParseResult',
    # Namespace roles
    'NamespaceRole',
    'NamespaceBinding',
    'NamespaceMap',
    'NamespaceResolver',
    'ROLE_ALIASES',
    'classify_uri',
]
