# Path: uk_accounts/output/sinks.py
"""
Record Sinks and Sink Registry

Destinations for extracted account records, and a registry to look
them up by format name.

Every sink flushes after each record, so a worker killed mid-archive
leaves a complete file up to the last processed document.

To add a new format:
1. Subclass RecordSink
2. Set format_name and file_extension, implement _write_row()
3. Register via SinkRegistry.register()
"""

import csv
import json
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, TextIO, Type, Union

from ..constants import OUTPUT_BASENAME
from ..core.logger import get_output_logger
from ..models.record import NormalizedAccountRecord, RECORD_FIELDS


logger = get_output_logger('sinks')

Record = Union[NormalizedAccountRecord, Mapping[str, Any]]


class RecordSink(ABC):
    """
    Abstract base for record sinks.

    A sink writes to a path it opens itself, or to a stream it was given
    (which it leaves open on close()).

    Example:
        with CsvRecordSink(Path("accounts.csv")) as sink:
            sink.write(record)
    """

    format_name: str = ''
    file_extension: str = ''

    def __init__(
        self,
        target: Union[Path, str, TextIO],
        fields: Sequence[str] = RECORD_FIELDS
    ):
        """
        Initialize sink.

        Args:
            target: Output path, or an open text stream
            fields: Output fields in order
        """
        self.fields = tuple(fields)
        self.count = 0

        if isinstance(target, (str, Path)):
            self.path: Optional[Path] = Path(target)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._stream = open(self.path, 'w', encoding='utf-8', newline='')
            self._owns_stream = True
            logger.info(f"Writing {self.format_name} records to {self.path}")
        else:
            self.path = None
            self._stream = target
            self._owns_stream = False

        self._start()

    def write(self, record: Record) -> None:
        """
        Write one record and flush.

        Args:
            record: NormalizedAccountRecord or mapping keyed by field name
        """
        row = record.to_dict() if isinstance(record, NormalizedAccountRecord) else record
        self._write_row({name: row.get(name) for name in self.fields})
        self._stream.flush()
        self.count += 1

    def close(self) -> None:
        """Close the sink (an owned stream only)."""
        if self._owns_stream and not self._stream.closed:
            self._stream.close()
            logger.info(f"Closed {self.path} after {self.count} records")

    def _start(self) -> None:
        """Hook run once after the stream is ready."""

    @abstractmethod
    def _write_row(self, row: Dict[str, Any]) -> None:
        """Write one row of field values."""

    def __enter__(self) -> 'RecordSink':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class CsvRecordSink(RecordSink):
    """CSV with a header row."""

    format_name = 'csv'
    file_extension = '.csv'

    def _start(self) -> None:
        self._writer = csv.writer(self._stream)
        self._writer.writerow(self.fields)
        self._stream.flush()

    def _write_row(self, row: Dict[str, Any]) -> None:
        self._writer.writerow([self._format_value(row[name]) for name in self.fields])

    def _format_value(self, value: Any) -> Any:
        """None as empty cell."""
        if value is None:
            return ''
        return value


class JsonLinesRecordSink(RecordSink):
    """One JSON object per line."""

    format_name = 'json'
    file_extension = '.json'

    def _write_row(self, row: Dict[str, Any]) -> None:
        self._stream.write(json.dumps(row, ensure_ascii=False))
        self._stream.write('\n')


class ListRecordSink:
    """
    In-memory sink.

    Example:
        sink = ListRecordSink()
        document.emit(sink)
        assert sink.records[0].account == 'DividendsPaid'
    """

    format_name = 'list'

    def __init__(self):
        self.records: list[Record] = []

    @property
    def count(self) -> int:
        return len(self.records)

    def write(self, record: Record) -> None:
        self.records.append(record)

    def close(self) -> None:
        pass

    def __enter__(self) -> 'ListRecordSink':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class SinkRegistry:
    """
    Registry of available file sinks.

    Lookup by format name (the --format option and output_format setting).
    """

    _sinks: Dict[str, Type[RecordSink]] = {}

    @classmethod
    def register(cls, sink_class: Type[RecordSink]) -> None:
        """Register a sink class."""
        cls._sinks[sink_class.format_name] = sink_class

    @classmethod
    def get(cls, format_name: str) -> Optional[Type[RecordSink]]:
        """Get a sink class by name."""
        return cls._sinks.get(format_name)

    @classmethod
    def get_available(cls) -> list[str]:
        """Return list of registered format names."""
        return list(cls._sinks.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations (for testing)."""
        cls._sinks.clear()


SinkRegistry.register(CsvRecordSink)
SinkRegistry.register(JsonLinesRecordSink)


def build_output_path(
    output_dir: Path,
    file_extension: str,
    worker_id: Optional[int] = None,
    timestamp: Optional[int] = None
) -> Path:
    """
    Output file name for a run.

    Args:
        output_dir: Directory to write into
        file_extension: Extension including dot
        worker_id: Worker number, omitted for single-process runs
        timestamp: Epoch seconds (now if None)

    Returns:
        output_dir / 'accounts[_<worker>]_<timestamp><ext>'
    """
    if timestamp is None:
        timestamp = int(time.time())

    parts = [OUTPUT_BASENAME]
    if worker_id is not None:
        parts.append(str(worker_id))
    parts.append(str(timestamp))

    return Path(output_dir) / ('_'.join(parts) + file_extension)


def open_sink(
    format_name: str,
    output_dir: Path,
    fields: Sequence[str] = RECORD_FIELDS,
    worker_id: Optional[int] = None
) -> RecordSink:
    """
    Create a registered sink writing to a fresh output file.

    Raises:
        ValueError: If format_name is not registered
    """
    sink_class = SinkRegistry.get(format_name)
    if sink_class is None:
        raise ValueError(
            f"Unknown output format '{format_name}', "
            f"available: {', '.join(SinkRegistry.get_available())}"
        )
    path = build_output_path(output_dir, sink_class.file_extension, worker_id)
    return sink_class(path, fields=fields)


__all__ = [
    'RecordSink',
    'CsvRecordSink',
    'JsonLinesRecordSink',
    'ListRecordSink',
    'SinkRegistry',
    'build_output_path',
    'open_sink',
]
