# Path: uk_accounts/foundation/namespace_resolver.py
"""
Namespace Resolver

Maps the prefixes a filing declares onto the logical roles the extractor
queries by.

Filings bind the same taxonomy to different prefixes (the FRC core taxonomy
may be 'core', 'uk-core' or the default namespace), and taxonomy versions
change the URI. Every query in this package therefore goes through a role,
never through a hard-coded prefix or URI.

Features:
- Regex classification of namespace URIs into seven roles
- HTML dialect: nsmap merged with scraped xmlns attributes
- Qualified-name and Clark-name construction per role
- Raw prefix->URI table for resolving arbitrary QNames

Example:
    resolver = NamespaceResolver()
    ns = resolver.resolve(root)

    ns.prefix(NamespaceRole.CORE)            # 'core'
    ns.clark(NamespaceRole.INSTANCE, 'unit') # '{http://www.xbrl.org/2003/instance}unit'
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from lxml import etree


# ==============================================================================
# NAMESPACE ROLES
# ==============================================================================

class NamespaceRole(Enum):
    """
    Logical namespace roles.

    Roles:
        INSTANCE: XBRL instance (xbrli)
        DIMENSIONS: XBRL dimensions instance (xbrldi)
        INLINE: Inline XBRL (ix)
        CORE: FRC core taxonomy
        BUSINESS: FRC business taxonomy
        COMPANIES_ACT: Companies House accounts extension (legacy XML filings)
        LEGACY_GAAP: Pre-FRS 102 UK GAAP taxonomy (legacy XML filings)
    """
    INSTANCE = "instance"
    DIMENSIONS = "dimensions"
    INLINE = "inline"
    CORE = "core"
    BUSINESS = "business"
    COMPANIES_ACT = "companies_act"
    LEGACY_GAAP = "legacy_gaap"

    def __str__(self) -> str:
        return self.value


ROLE_PATTERNS: dict[NamespaceRole, re.Pattern] = {
    NamespaceRole.INSTANCE: re.compile(r'^http://www\.xbrl\.org/[^/]+/instance$'),
    NamespaceRole.DIMENSIONS: re.compile(r'^http://xbrl\.org/[^/]+/xbrldi$'),
    NamespaceRole.INLINE: re.compile(r'^http://www\.xbrl\.org/[^/]+/inlineXBRL$'),
    NamespaceRole.CORE: re.compile(r'^http://xbrl\.frc\.org\.uk/fr/[^/]+/core$'),
    NamespaceRole.BUSINESS: re.compile(r'^http://xbrl\.frc\.org\.uk/cd/[^/]+/business$'),
    NamespaceRole.COMPANIES_ACT: re.compile(
        r'^http://www\.companieshouse\.gov\.uk/ef/xbrl/uk/fr/gaap/ae/[^/]+$'
    ),
    NamespaceRole.LEGACY_GAAP: re.compile(r'^http://www\.xbrl\.org/uk/fr/gaap/pt/[^/]+$'),
}

# Conventional prefixes, used to name roles in configuration
ROLE_ALIASES: dict[str, NamespaceRole] = {
    'xbrli': NamespaceRole.INSTANCE,
    'xbrldi': NamespaceRole.DIMENSIONS,
    'ix': NamespaceRole.INLINE,
    'core': NamespaceRole.CORE,
    'bus': NamespaceRole.BUSINESS,
    'ae': NamespaceRole.COMPANIES_ACT,
    'pt': NamespaceRole.LEGACY_GAAP,
}

DEFAULT_PREFIX: str = ''


def classify_uri(uri: str) -> Optional[NamespaceRole]:
    """
    Classify a namespace URI.

    Args:
        uri: Namespace URI

    Returns:
        Matching NamespaceRole or None
    """
    for role, pattern in ROLE_PATTERNS.items():
        if pattern.match(uri):
            return role
    return None


# ==============================================================================
# NAMESPACE MAP
# ==============================================================================

@dataclass(frozen=True)
class NamespaceBinding:
    """
    Prefix bound to a role.

    Attributes:
        prefix: Declared prefix ('' for the default namespace)
        uri: Declared namespace URI
    """
    prefix: str
    uri: str

    def qualify(self, local_name: str) -> str:
        """Prefix-qualified name as written in the document."""
        if self.prefix == DEFAULT_PREFIX:
            return local_name
        return f"{self.prefix}:{local_name}"

    def clark(self, local_name: str) -> str:
        """Clark-notation name used by lxml."""
        return f"{{{self.uri}}}{local_name}"


class NamespaceMap:
    """
    Resolved namespaces of one document.

    Lookups for a role the document never declared return None; callers
    treat that as an empty result set.

    Example:
        ns = NamespaceMap(
            {NamespaceRole.CORE: NamespaceBinding('core', CORE_URI)},
            {'core': CORE_URI}
        )
        ns.qualified(NamespaceRole.CORE, 'DividendsPaid')  # 'core:DividendsPaid'
    """

    def __init__(
        self,
        bindings: dict[NamespaceRole, NamespaceBinding],
        declarations: dict[str, str]
    ):
        self._bindings = dict(bindings)
        self._declarations = dict(declarations)

    def get(self, role: NamespaceRole) -> Optional[NamespaceBinding]:
        """Binding for role, or None."""
        return self._bindings.get(role)

    def has(self, role: NamespaceRole) -> bool:
        """Check if the document declares role."""
        return role in self._bindings

    def prefix(self, role: NamespaceRole) -> Optional[str]:
        """Prefix bound to role, or None."""
        binding = self._bindings.get(role)
        return binding.prefix if binding else None

    def uri(self, role: NamespaceRole) -> Optional[str]:
        """URI bound to role, or None."""
        binding = self._bindings.get(role)
        return binding.uri if binding else None

    def qualified(self, role: NamespaceRole, local_name: str) -> Optional[str]:
        """
        Name as written in the document (e.g. 'core:DividendsPaid').

        Returns:
            Qualified name, or None when role is absent
        """
        binding = self._bindings.get(role)
        return binding.qualify(local_name) if binding else None

    def clark(self, role: NamespaceRole, local_name: str) -> Optional[str]:
        """
        Clark-notation name (e.g. '{uri}unit').

        Returns:
            Clark name, or None when role is absent
        """
        binding = self._bindings.get(role)
        return binding.clark(local_name) if binding else None

    def resolve_qname(self, qname: str) -> Optional[str]:
        """
        Turn a prefixed name into its Clark name using the raw declarations.

        Args:
            qname: 'prefix:Local' or 'Local' (default namespace)

        Returns:
            Clark name, or None when the prefix is undeclared
        """
        if ':' in qname:
            prefix, local_name = qname.split(':', 1)
        else:
            prefix, local_name = DEFAULT_PREFIX, qname

        uri = self._declarations.get(prefix)
        if uri is None:
            return None
        return f"{{{uri}}}{local_name}"

    @property
    def declarations(self) -> dict[str, str]:
        """Every prefix->URI declaration found."""
        return dict(self._declarations)

    def roles(self) -> list[NamespaceRole]:
        """Roles present in the document."""
        return list(self._bindings.keys())

    def to_dict(self) -> dict[str, dict[str, str]]:
        """Convert to dictionary."""
        return {
            role.value: {'prefix': binding.prefix, 'uri': binding.uri}
            for role, binding in self._bindings.items()
        }

    def __repr__(self) -> str:
        roles = ", ".join(f"{r.value}={b.prefix!r}" for r, b in self._bindings.items())
        return f"NamespaceMap({roles})"


# ==============================================================================
# RESOLVER
# ==============================================================================

class NamespaceResolver:
    """
    Builds a NamespaceMap from a document root.

    When two prefixes bind URIs of the same role, the first declaration
    wins and the second is logged.

    Example:
        resolver = NamespaceResolver()
        ns = resolver.resolve(root, scrape_attributes=True)
    """

    def __init__(self):
        """Initialize resolver."""
        self.logger = logging.getLogger(__name__)

    def resolve(
        self,
        root: etree._Element,
        scrape_attributes: bool = False
    ) -> NamespaceMap:
        """
        Resolve namespace roles of a document.

        Args:
            root: Root element (html for iXBRL, xbrl for XML)
            scrape_attributes: Also read literal xmlns attributes (HTML dialect)

        Returns:
            NamespaceMap
        """
        declarations = self.collect_declarations(root, scrape_attributes)
        bindings: dict[NamespaceRole, NamespaceBinding] = {}

        for prefix, uri in declarations.items():
            role = classify_uri(uri)
            if role is None:
                continue

            if role in bindings:
                self.logger.debug(
                    f"Ignoring second {role} binding '{prefix}' -> {uri} "
                    f"(kept '{bindings[role].prefix}')"
                )
                continue

            bindings[role] = NamespaceBinding(prefix=prefix, uri=uri)

        self.logger.debug(
            f"Resolved {len(bindings)} namespace roles from "
            f"{len(declarations)} declarations"
        )
        return NamespaceMap(bindings, declarations)

    def collect_declarations(
        self,
        root: etree._Element,
        scrape_attributes: bool = False
    ) -> dict[str, str]:
        """
        Collect prefix->URI declarations in scope of root.

        Args:
            root: Root element
            scrape_attributes: Also read literal xmlns attributes

        Returns:
            Dictionary mapping prefix ('' for default) to URI
        """
        declarations: dict[str, str] = {}

        for prefix, uri in (root.nsmap or {}).items():
            declarations[prefix if prefix is not None else DEFAULT_PREFIX] = uri

        if scrape_attributes:
            # Documents parsed as HTML keep xmlns declarations as attributes
            for key, value in root.attrib.items():
                if key == 'xmlns':
                    declarations.setdefault(DEFAULT_PREFIX, value)
                elif key.startswith('xmlns:'):
                    declarations.setdefault(key[6:], value)

        return declarations


__all__ = [
    'NamespaceRole',
    'ROLE_PATTERNS',
    'ROLE_ALIASES',
    'DEFAULT_PREFIX',
    'classify_uri',
    'NamespaceBinding',
    'NamespaceMap',
    'NamespaceResolver',
]
