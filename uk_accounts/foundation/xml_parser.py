# Path: uk_accounts/foundation/xml_parser.py
"""
XML Processing Engine

Strict XML parsing of filing documents held in memory.

iXBRL documents are XHTML, so both dialects go through the same XML
parser. Recovery mode is off: a document that is not well-formed is
reported as malformed instead of being silently repaired, because a
repaired tree can drop facts without any trace.

Features:
- Parsing from bytes (archive entries are never written to disk first)
- XXE (XML External Entity) protection, no network access
- huge_tree toggle for large filings
- Error reporting through ParsingError
"""

from lxml import etree
from typing import Optional
from dataclasses import dataclass, field
import logging

from ..config_loader import ConfigLoader
from ..models.error import (
    ParsingError,
    ErrorCategory,
    create_standard_error,
)


@dataclass
class XMLParseResult:
    """
    Result of XML parsing operation.

    Attributes:
        root: Root element (None if not well-formed)
        errors: list of errors encountered
        well_formed: Whether XML is well-formed
        source_file: Name of the parsed document
    """
    root: Optional[etree._Element]
    errors: list[ParsingError] = field(default_factory=list)
    well_formed: bool = True
    source_file: Optional[str] = None

    def has_errors(self) -> bool:
        """Check if result has any errors."""
        return len(self.errors) > 0


class XMLParser:
    """
    Strict XML parser for filing documents.

    Example:
        parser = XMLParser()
        result = parser.parse_bytes(data, "Prod223_0001_01234567_20230331.html")

        if result.well_formed:
            root = result.root
        else:
            for error in result.errors:
                print(f"Error: {error.message}")
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize XML parser.

        Args:
            config: Optional ConfigLoader instance (creates new if not provided)
        """
        self.config = config if config else ConfigLoader()
        self.logger = logging.getLogger(__name__)

        self.huge_tree = self.config.get('huge_tree', True)

    def parse_bytes(self, data: bytes, source_name: Optional[str] = None) -> XMLParseResult:
        """
        Parse document bytes.

        Args:
            data: Raw document bytes
            source_name: Document name for diagnostics

        Returns:
            XMLParseResult with root element or error information
        """
        parser = self._create_parser()

        try:
            root = etree.fromstring(data, parser)
        except etree.XMLSyntaxError as e:
            self.logger.debug(f"XML syntax error in {source_name}: {e}")
            return XMLParseResult(
                root=None,
                errors=[create_standard_error(
                    ErrorCategory.XML_MALFORMED,
                    f"Malformed XML: {e}",
                    source_file=source_name,
                    details=f"line {e.lineno}" if getattr(e, 'lineno', None) else None,
                )],
                well_formed=False,
                source_file=source_name,
            )

        if root is None:
            return XMLParseResult(
                root=None,
                errors=[create_standard_error(
                    ErrorCategory.XML_MALFORMED,
                    "Empty document",
                    source_file=source_name,
                )],
                well_formed=False,
                source_file=source_name,
            )

        return XMLParseResult(root=root, source_file=source_name)

    def _create_parser(self) -> etree.XMLParser:
        """
        Create lxml parser with security settings.

        Returns:
            Configured XMLParser instance
        """
        return etree.XMLParser(
            recover=False,
            remove_blank_text=False,  # Preserve whitespace
            resolve_entities=False,  # XXE protection
            no_network=True,  # No network access
            huge_tree=self.huge_tree,
            remove_comments=False,
            remove_pis=False,
        )


__all__ = ['XMLParser', 'XMLParseResult']
