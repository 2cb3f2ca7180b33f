# Path: uk_accounts/__init__.py
"""
uk_accounts

Extraction of financial facts from UK statutory accounts filed with
Companies House as iXBRL (.html) or XBRL (.xml) documents.

Layers:
    foundation  - XML parsing, namespace role resolution
    instance    - unit/context tables, fact extraction, segment labels
    document    - per-document orchestration
    reporting   - filtering, de-duplication, registry enrichment
    output      - record sinks
    batch       - resumable archive processing

Example:
    from uk_accounts import AccountsDocument, ListRecordSink

    document = AccountsDocument(data, "Prod223_2285_01234567_20230331.html")
    if document.parse():
        sink = ListRecordSink()
        document.emit(sink)
"""

__version__ = '0.1.0'

from .config_loader import ConfigLoader
from .catalogue import AccountTag, DEFAULT_CATALOGUE, parse_tag_list, load_catalogue
from .document import AccountsDocument, DocumentState
from .filing import FilingName
from .models import (
    ErrorCollection,
    ErrorCategory,
    ErrorSeverity,
    ParsingError,
    NormalizedAccountRecord,
)
from .output.sinks import CsvRecordSink, JsonLinesRecordSink, ListRecordSink


__all__ = [
    '__version__',
    'ConfigLoader',
    'AccountTag',
    'DEFAULT_CATALOGUE',
    'parse_tag_list',
    'load_catalogue',
    'AccountsDocument',
    'DocumentState',
    'FilingName',
    'ErrorCollection',
    'ErrorCategory',
    'ErrorSeverity',
    'ParsingError',
    'NormalizedAccountRecord',
    'CsvRecordSink',
    'JsonLinesRecordSink',
    'ListRecordSink',
]
