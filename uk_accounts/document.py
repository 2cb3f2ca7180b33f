# Path: uk_accounts/document.py
"""
Accounts Document

Per-document orchestrator: parse, build tables, extract catalogue accounts.

This module coordinates:
- Dialect selection by filename suffix
- Namespace role resolution
- Unit and context table construction (before any fact is touched)
- Company number lookup with filename fallback
- Catalogue-driven record extraction and emission

States:
    UNPARSED -> NAMESPACES_LOADED -> TABLES_BUILT -> PARSED
    any step can end in PARSE_FAILED

A malformed document never raises out of parse(). Its raw bytes are
written to the failed-documents directory for later inspection and the
call returns False.

Example:
    document = AccountsDocument(data, "Prod223_2285_01234567_20230331.html")

    if document.parse():
        for record in document.extract_accounts():
            print(record.to_row())
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from .config_loader import ConfigLoader
from .catalogue import AccountTag, load_catalogue
from .constants import Dialect, HTML_COMPANY_NUMBER_TAG, XML_COMPANY_NUMBER_TAG
from .filing import FilingName
from .foundation.namespace_resolver import NamespaceResolver, NamespaceRole
from .foundation.xml_parser import XMLParser
from .instance.constants import IX_NON_NUMERIC, ATTR_NAME
from .instance.context_parser import ContextParser
from .instance.fact_extractor import FactExtractor
from .instance.segment_resolver import SegmentResolver
from .instance.tables import DocumentTables
from .instance.unit_parser import UnitParser
from .models.error import ErrorCollection, ErrorCategory
from .models.fact import Fact
from .models.record import NormalizedAccountRecord


class DocumentState(Enum):
    """
    Parse state of a document.

    States:
        UNPARSED: Nothing done yet (or unsupported dialect)
        NAMESPACES_LOADED: Namespace roles resolved
        TABLES_BUILT: Unit and context tables built
        PARSED: Ready for extraction
        PARSE_FAILED: Malformed markup or unexpected failure
    """
    UNPARSED = "UNPARSED"
    NAMESPACES_LOADED = "NAMESPACES_LOADED"
    TABLES_BUILT = "TABLES_BUILT"
    PARSED = "PARSED"
    PARSE_FAILED = "PARSE_FAILED"

    def __str__(self) -> str:
        return self.value


class AccountsDocument:
    """
    One filing document.

    Attributes:
        filing: Parsed filename (registered number, filing date, dialect)
        errors: Diagnostics collection
        state: Current DocumentState
        tables: Document tables once TABLES_BUILT
        company_number: Registered company number once PARSED

    Example:
        errors = ErrorCollection()
        document = AccountsDocument(data, name, errors=errors)
        document.parse()

        with CsvRecordSink(path) as sink:
            document.emit(sink)
    """

    def __init__(
        self,
        data: bytes,
        filename: str,
        config: Optional[ConfigLoader] = None,
        errors: Optional[ErrorCollection] = None
    ):
        """
        Initialize document.

        Args:
            data: Raw document bytes
            filename: Document name (selects dialect, supplies fallbacks)
            config: Configuration loader
            errors: Diagnostics collection (new one if not provided)
        """
        self.config = config or ConfigLoader()
        self.logger = logging.getLogger(__name__)

        self.data = data
        self.filing = FilingName.parse(filename)
        self.errors = errors if errors is not None else ErrorCollection()

        self.state = DocumentState.UNPARSED
        self.tables: Optional[DocumentTables] = None
        self.segment_resolver: Optional[SegmentResolver] = None
        self.company_number: Optional[str] = None

        self.xml_parser = XMLParser(self.config)
        self.namespace_resolver = NamespaceResolver()
        self.unit_parser = UnitParser(self.config)
        self.context_parser = ContextParser(self.config)
        self.fact_extractor = FactExtractor(self.config)

    @property
    def filename(self) -> str:
        return self.filing.filename

    @property
    def dialect(self) -> Optional[Dialect]:
        return self.filing.dialect

    def is_parsed(self) -> bool:
        """Check if extraction is possible."""
        return self.state == DocumentState.PARSED

    # ==========================================================================
    # PARSING
    # ==========================================================================

    def parse(self) -> bool:
        """
        Parse the document and build its tables.

        Calling parse() again returns the outcome of the first call.

        Returns:
            True when the document reached PARSED
        """
        if self.state != DocumentState.UNPARSED:
            return self.is_parsed()

        if self.dialect is None:
            self.logger.warning(f"Unsupported document type: {self.filename}")
            return False

        try:
            self._parse()
        except Exception as e:
            self.logger.error(f"Failed to parse {self.filename}: {e}", exc_info=True)
            self._fail(f"Unexpected failure while parsing: {e}")

        return self.is_parsed()

    def _parse(self) -> None:
        """Run the parse steps in dependency order."""
        result = self.xml_parser.parse_bytes(self.data, self.filename)
        if not result.well_formed:
            self._fail(
                result.errors[0].message if result.errors else "Malformed document",
                details=result.errors[0].details if result.errors else None,
            )
            return

        root = result.root
        ns = self.namespace_resolver.resolve(
            root,
            scrape_attributes=self.dialect == Dialect.HTML
        )
        self.tables = DocumentTables(
            root=root,
            dialect=self.dialect,
            ns=ns,
            errors=self.errors,
            source_file=self.filename,
        )
        self.state = DocumentState.NAMESPACES_LOADED

        self.tables.units = self.unit_parser.parse_units(root, ns)
        self.tables.contexts = self.context_parser.parse_contexts(
            root, ns, self.errors, self.filename
        )
        self.state = DocumentState.TABLES_BUILT

        if self.dialect == Dialect.HTML:
            self.segment_resolver = SegmentResolver.build(
                self.tables,
                self.config.get('individual_name_tag', 'bus:NameEntityOfficer')
            )

        self.company_number = self._find_company_number() or self.filing.registered_number
        self.state = DocumentState.PARSED

        self.logger.debug(
            f"Parsed {self.filename}: company={self.company_number}, "
            f"{len(self.tables.contexts)} contexts, {len(self.tables.units)} units"
        )

    def _fail(self, message: str, details: Optional[str] = None) -> None:
        """Mark document failed, keep its bytes and report."""
        self.state = DocumentState.PARSE_FAILED
        self.errors.report_error(
            ErrorCategory.XML_MALFORMED,
            message,
            details=details,
            source_file=self.filename,
        )
        self._persist_failed_document()

    def _persist_failed_document(self) -> Optional[Path]:
        """
        Write raw bytes to the failed-documents directory.

        Returns:
            Path written, or None when writing failed
        """
        failed_dir = Path(self.config.get('failed_documents_dir', 'failed_documents'))
        target = failed_dir / self.filing.basename

        try:
            failed_dir.mkdir(parents=True, exist_ok=True)
            target.write_bytes(self.data)
        except OSError as e:
            self.logger.error(f"Could not keep failed document {target}: {e}")
            return None

        self.logger.info(f"Failed document kept at {target}")
        return target

    def _find_company_number(self) -> Optional[str]:
        """Company number tagged in the document, if any."""
        ns = self.tables.ns

        if self.dialect == Dialect.HTML:
            name = ns.qualified(NamespaceRole.BUSINESS, HTML_COMPANY_NUMBER_TAG)
            if name is None:
                return None
            for elem in self.tables.iter_inline(IX_NON_NUMERIC):
                if elem.get(ATTR_NAME) != name:
                    continue
                # Direct text, unless the number sits inside formatting children
                text = (elem.text or '').strip()
                if not text:
                    text = ''.join(elem.itertext()).strip()
                return text or None
            return None

        tag = ns.clark(NamespaceRole.COMPANIES_ACT, XML_COMPANY_NUMBER_TAG)
        if tag is None:
            return None
        for elem in self.tables.root.iter(tag):
            text = ''.join(elem.itertext()).strip()
            return text or None
        return None

    # ==========================================================================
    # EXTRACTION
    # ==========================================================================

    def extract_facts(self, tag: AccountTag) -> list[Fact]:
        """
        Facts for one catalogue tag.

        Args:
            tag: Catalogue entry

        Returns:
            list of facts (empty when the document lacks the tag's role)

        Raises:
            RuntimeError: If the document is not PARSED
        """
        self._require_parsed()

        qualified = tag.qualified(self.tables.ns)
        if qualified is None:
            return []

        return self.fact_extractor.extract(
            self.tables,
            qualified,
            tag.is_numeric,
            self.segment_resolver
        )

    def extract_accounts(
        self,
        catalogue: Optional[Iterable[AccountTag]] = None
    ) -> list[NormalizedAccountRecord]:
        """
        Records for every catalogue tag.

        Args:
            catalogue: Tags to extract (configured catalogue if None)

        Returns:
            list of NormalizedAccountRecord, catalogue order

        Raises:
            RuntimeError: If the document is not PARSED
        """
        self._require_parsed()

        if catalogue is None:
            catalogue = load_catalogue(self.config)

        records = []
        for tag in catalogue:
            for fact in self.extract_facts(tag):
                record = NormalizedAccountRecord.from_fact(
                    fact,
                    company_number=self.company_number,
                    filing_date=self.filing.filing_date,
                )
                record.account = tag.name
                records.append(record)

        return records

    def emit(self, sink, catalogue: Optional[Iterable[AccountTag]] = None) -> int:
        """
        Write catalogue records to a sink.

        Args:
            sink: RecordSink
            catalogue: Tags to extract (configured catalogue if None)

        Returns:
            Number of records written
        """
        count = 0
        for record in self.extract_accounts(catalogue):
            sink.write(record)
            count += 1
        return count

    def _require_parsed(self) -> None:
        if not self.is_parsed():
            raise RuntimeError(
                f"Document {self.filename} is {self.state}, extraction needs PARSED"
            )

    def __repr__(self) -> str:
        return f"AccountsDocument({self.filename!r}, state={self.state})"


__all__ = ['DocumentState', 'AccountsDocument']
