# Path: uk_accounts/catalogue.py
"""
Account Catalogue

The list of tags extracted from every document.

Tags are named by namespace role and local name, never by document prefix.
In configuration a tag is written with the conventional alias of its role:

    core:DividendsPaid          numeric fact in the FRC core taxonomy
    bus:NameEntityOfficer#text  textual fact in the FRC business taxonomy

Aliases: xbrli, xbrldi, ix, core, bus, ae, pt.

Example:
    catalogue = parse_tag_list(["core:TurnoverRevenue", "bus:EntityCurrentLegalOrRegisteredName#text"])

    for tag in catalogue:
        print(tag.qualified(ns))   # 'uk-core:TurnoverRevenue' in a document using 'uk-core'
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from .config_loader import ConfigLoader
from .foundation.namespace_resolver import NamespaceMap, NamespaceRole, ROLE_ALIASES


TEXT_SUFFIX = '#text'

ALIAS_BY_ROLE: dict[NamespaceRole, str] = {role: alias for alias, role in ROLE_ALIASES.items()}


@dataclass(frozen=True)
class AccountTag:
    """
    Catalogue entry.

    Attributes:
        role: Namespace role of the tag
        name: Local name (e.g., 'DividendsPaid')
        is_numeric: True for nonFraction facts, False for nonNumeric
    """
    role: NamespaceRole
    name: str
    is_numeric: bool = True

    def qualified(self, ns: NamespaceMap) -> Optional[str]:
        """
        Name as written in a document.

        Args:
            ns: Resolved namespaces of the document

        Returns:
            'prefix:Name', or None when the document lacks the role
        """
        return ns.qualified(self.role, self.name)

    @classmethod
    def parse(cls, entry: str) -> 'AccountTag':
        """
        Parse 'alias:LocalName[#text]'.

        Raises:
            ValueError: On unknown alias or missing local name
        """
        text = entry.strip()
        is_numeric = True
        if text.endswith(TEXT_SUFFIX):
            text = text[:-len(TEXT_SUFFIX)]
            is_numeric = False

        alias, sep, name = text.partition(':')
        if not sep or not name:
            raise ValueError(f"Catalogue entry must be 'alias:LocalName': {entry!r}")

        role = ROLE_ALIASES.get(alias)
        if role is None:
            raise ValueError(
                f"Unknown namespace alias '{alias}' in {entry!r}, "
                f"expected one of {', '.join(ROLE_ALIASES)}"
            )

        return cls(role=role, name=name, is_numeric=is_numeric)

    def __str__(self) -> str:
        text = f"{ALIAS_BY_ROLE[self.role]}:{self.name}"
        return text if self.is_numeric else text + TEXT_SUFFIX


DEFAULT_CATALOGUE: tuple[AccountTag, ...] = (
    # FRS 102 / FRS 105 core taxonomy
    AccountTag(NamespaceRole.CORE, 'TurnoverRevenue'),
    AccountTag(NamespaceRole.CORE, 'WagesSalaries'),
    AccountTag(NamespaceRole.CORE, 'DividendsPaid'),
    AccountTag(NamespaceRole.CORE, 'FixedAssets'),
    AccountTag(NamespaceRole.CORE, 'RetainedEarningsAccumulatedLosses'),
    AccountTag(NamespaceRole.BUSINESS, 'EntityCurrentLegalOrRegisteredName', is_numeric=False),
    # Legacy UK GAAP
    AccountTag(NamespaceRole.LEGACY_GAAP, 'TurnoverGrossOperatingRevenue'),
    AccountTag(NamespaceRole.LEGACY_GAAP, 'WagesSalaries'),
    AccountTag(NamespaceRole.LEGACY_GAAP, 'FixedAssets'),
    AccountTag(NamespaceRole.LEGACY_GAAP, 'ProfitLossAccountReserve'),
)


def parse_tag_list(entries: Iterable[str]) -> list[AccountTag]:
    """
    Parse catalogue entries.

    Args:
        entries: 'alias:LocalName[#text]' strings, blanks ignored

    Returns:
        list of AccountTag

    Raises:
        ValueError: On the first malformed entry
    """
    return [AccountTag.parse(entry) for entry in entries if entry.strip()]


def load_catalogue(config: Optional[ConfigLoader] = None) -> list[AccountTag]:
    """
    Catalogue from configuration, falling back to DEFAULT_CATALOGUE.

    Args:
        config: Configuration loader

    Returns:
        list of AccountTag
    """
    config = config or ConfigLoader()
    entries = config.get('account_tags') or []
    if entries:
        return parse_tag_list(entries)
    return list(DEFAULT_CATALOGUE)


__all__ = [
    'AccountTag',
    'DEFAULT_CATALOGUE',
    'parse_tag_list',
    'load_catalogue',
]
