# Path: uk_accounts/output/__init__.py
"""
Output Sinks

File and in-memory destinations for account records.
"""

from .sinks import (
    RecordSink,
    CsvRecordSink,
    JsonLinesRecordSink,
    ListRecordSink,
    SinkRegistry,
    build_output_path,
    open_sink,
)

__all__ = [
    'RecordSink',
    'CsvRecordSink',
    'JsonLinesRecordSink',
    'ListRecordSink',
    'SinkRegistry',
    'build_output_path',
    'open_sink',
]
