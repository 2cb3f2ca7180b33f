# Path: uk_accounts/batch/archive_processor.py
"""
Archive Processor

Batch extraction over Companies House bulk accounts archives.

This module handles:
- Iterating zip archives in a directory (sorted, optional name pattern)
- Iterating archive entries with resumable progress
- Parsing each .html / .xml entry and emitting its records
- Filtering and registry enrichment before records reach the sink
- Parallel runs: worker N processes '<directory>/<N>' into its own file

A corrupt archive is reported and skipped; the batch goes on with the
next one. A malformed document is handled by AccountsDocument and only
counted here. An unexpected error while extracting one document is
reported as EXTRACTION_FAILED and the document counts as failed. Sink
errors are not caught.

Example:
    with CsvRecordSink(Path("accounts.csv")) as sink:
        processor = ArchiveProcessor(sink)
        stats = processor.process_directory(Path("/data/accounts"))
        print(stats.to_dict())
"""

import re
import zipfile
import zlib
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from ..config_loader import ConfigLoader
from ..catalogue import AccountTag, load_catalogue, parse_tag_list
from ..constants import ARCHIVE_GLOB
from ..core.logger import get_input_logger, setup_ipo_logging
from ..document import AccountsDocument, DocumentState
from ..models.error import ErrorCollection, ErrorCategory, ParsingError
from ..models.record import RECORD_FIELDS
from ..output.sinks import open_sink
from ..reporting.account_filter import AccountFilter, AccountDeduplicator, PeriodWindow
from ..reporting.company_registry import CompanyRegistry, CsvCompanyRegistry, ENRICHED_FIELDS
from ..batch.progress import ProgressStore


# ==============================================================================
# STATISTICS
# ==============================================================================

@dataclass
class BatchStatistics:
    """
    Counters of a batch run.

    Attributes:
        archives_processed: Archives opened and iterated
        archives_failed: Archives that could not be read
        documents_parsed: Documents that reached PARSED
        documents_failed: Documents that ended PARSE_FAILED or whose extraction failed
        documents_skipped: Entries skipped (already processed or pattern mismatch)
        documents_unsupported: Entries with an unsupported suffix
        records_emitted: Records written to the sink
        diagnostics: Diagnostic counts by category name
    """
    archives_processed: int = 0
    archives_failed: int = 0
    documents_parsed: int = 0
    documents_failed: int = 0
    documents_skipped: int = 0
    documents_unsupported: int = 0
    records_emitted: int = 0
    diagnostics: dict[str, int] = field(default_factory=dict)

    def count_diagnostic(self, error: ParsingError) -> None:
        name = error.category.value
        self.diagnostics[name] = self.diagnostics.get(name, 0) + 1

    def merge(self, other: 'BatchStatistics') -> None:
        """Add another run's counters to this one."""
        self.archives_processed += other.archives_processed
        self.archives_failed += other.archives_failed
        self.documents_parsed += other.documents_parsed
        self.documents_failed += other.documents_failed
        self.documents_skipped += other.documents_skipped
        self.documents_unsupported += other.documents_unsupported
        self.records_emitted += other.records_emitted
        for name, count in other.diagnostics.items():
            self.diagnostics[name] = self.diagnostics.get(name, 0) + count

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            'archives_processed': self.archives_processed,
            'archives_failed': self.archives_failed,
            'documents_parsed': self.documents_parsed,
            'documents_failed': self.documents_failed,
            'documents_skipped': self.documents_skipped,
            'documents_unsupported': self.documents_unsupported,
            'records_emitted': self.records_emitted,
            'diagnostics': dict(self.diagnostics),
        }


# ==============================================================================
# ARCHIVE PROCESSOR
# ==============================================================================

class ArchiveProcessor:
    """
    Extracts records from archives into one sink.

    Example:
        processor = ArchiveProcessor(
            sink,
            record_filter=AccountFilter(ignore_sign=True),
            registry=CsvCompanyRegistry.load(Path("BasicCompanyData.csv")),
        )
        processor.process_archive(Path("Accounts_Bulk_Data-2023-03-31.zip"))
    """

    def __init__(
        self,
        sink,
        config: Optional[ConfigLoader] = None,
        catalogue: Optional[Iterable[AccountTag]] = None,
        record_filter: Optional[AccountFilter] = None,
        registry: Optional[CompanyRegistry] = None,
        listener: Optional[Callable[[ParsingError], None]] = None,
        worker_id: Optional[int] = None
    ):
        """
        Initialize processor.

        Args:
            sink: RecordSink receiving records
            config: Configuration loader
            catalogue: Tags to extract (configured catalogue if None)
            record_filter: Optional AccountFilter
            registry: Optional CompanyRegistry for enrichment
            listener: Optional callback for every diagnostic
            worker_id: Worker number, used in log lines
        """
        self.config = config or ConfigLoader()
        self.logger = get_input_logger('archive_processor')

        self.sink = sink
        self.catalogue = list(catalogue) if catalogue is not None else load_catalogue(self.config)
        self.record_filter = record_filter
        self.registry = registry
        self.listener = listener
        self.worker_id = worker_id
        self.statistics = BatchStatistics()

        if record_filter is not None and record_filter.deduplicator is not None:
            record_filter.deduplicator.errors.listener = self._on_diagnostic

        self.logger.debug(
            f"{self._tag}ArchiveProcessor initialized with {len(self.catalogue)} tags"
        )

    @property
    def _tag(self) -> str:
        return f"[Worker{self.worker_id if self.worker_id is not None else 0}]"

    def _on_diagnostic(self, error: ParsingError) -> None:
        self.statistics.count_diagnostic(error)
        if self.listener is not None:
            self.listener(error)

    # ==========================================================================
    # DIRECTORIES AND ARCHIVES
    # ==========================================================================

    def process_directory(
        self,
        directory: Path,
        file_pattern: Optional[re.Pattern] = None,
        zip_pattern: Optional[re.Pattern] = None
    ) -> BatchStatistics:
        """
        Process every archive of a directory in name order.

        Args:
            directory: Directory holding *.zip archives
            file_pattern: Only entries whose name matches
            zip_pattern: Only archives whose name matches

        Returns:
            Statistics accumulated by this processor
        """
        for zip_path in sorted(Path(directory).glob(ARCHIVE_GLOB)):
            if zip_pattern is not None and not zip_pattern.search(zip_path.name):
                self.logger.debug(f"{self._tag}Skipping archive {zip_path.name}")
                continue
            self.process_archive(zip_path, file_pattern)

        return self.statistics

    def process_archive(
        self,
        zip_path: Path,
        file_pattern: Optional[re.Pattern] = None
    ) -> BatchStatistics:
        """
        Process one archive, resuming after the last processed entry.

        Args:
            zip_path: Archive path
            file_pattern: Only entries whose name matches

        Returns:
            Statistics accumulated by this processor
        """
        progress = ProgressStore(zip_path)
        self.logger.info(
            f"{self._tag}zipfile: {zip_path.name}, processed: {progress.processed}"
        )

        try:
            archive = zipfile.ZipFile(zip_path)
        except (zipfile.BadZipFile, OSError) as e:
            return self._archive_unreadable(zip_path, e)

        with archive:
            entries = archive.infolist()
            number = len(entries)

            for i, entry in enumerate(entries):
                if progress.is_done(i):
                    self.logger.debug(
                        f"{self._tag}[skipped]({i + 1}/{number}): {entry.filename}"
                    )
                    self.statistics.documents_skipped += 1
                    continue

                if entry.is_dir():
                    progress.mark(i)
                    continue

                if file_pattern is not None and not file_pattern.search(entry.filename):
                    self.statistics.documents_skipped += 1
                    continue

                self.logger.info(f"{self._tag}({i + 1}/{number}): {entry.filename}")
                try:
                    data = archive.read(entry)
                except (zipfile.BadZipFile, zlib.error, OSError) as e:
                    return self._archive_unreadable(zip_path, e)

                self.process_document(data, entry.filename)
                progress.mark(i)

        self.statistics.archives_processed += 1
        return self.statistics

    def _archive_unreadable(self, zip_path: Path, error: Exception) -> BatchStatistics:
        """Report an archive that cannot be opened or read."""
        self.statistics.archives_failed += 1
        ErrorCollection(listener=self._on_diagnostic).report_error(
            ErrorCategory.ARCHIVE_UNREADABLE,
            f"{self._tag}In processing {zip_path.name}: {error}",
            source_file=str(zip_path),
        )
        return self.statistics

    # ==========================================================================
    # DOCUMENTS
    # ==========================================================================

    def process_document(self, data: bytes, filename: str) -> int:
        """
        Parse one document and emit its records.

        Args:
            data: Raw document bytes
            filename: Entry name

        Returns:
            Number of records written
        """
        errors = ErrorCollection(listener=self._on_diagnostic)
        document = AccountsDocument(data, filename, config=self.config, errors=errors)

        if not document.parse():
            if document.state == DocumentState.PARSE_FAILED:
                self.statistics.documents_failed += 1
            else:
                self.statistics.documents_unsupported += 1
            return 0

        try:
            records = document.extract_accounts(self.catalogue)
            if self.record_filter is not None:
                records = self.record_filter.apply(records)
        except Exception as e:
            self.logger.debug(f"{self._tag}Extraction failed for {filename}", exc_info=True)
            self.statistics.documents_failed += 1
            errors.report_error(
                ErrorCategory.EXTRACTION_FAILED,
                f"{self._tag}Extraction failed: {e}",
                source_file=filename,
            )
            return 0

        self.statistics.documents_parsed += 1

        for record in records:
            self.sink.write(self.registry.enrich(record) if self.registry else record)

        self.statistics.records_emitted += len(records)
        return len(records)


# ==============================================================================
# BATCH JOBS
# ==============================================================================

@dataclass
class BatchJob:
    """
    Picklable description of a batch run.

    Attributes:
        directory: Directory of archives (worker subdirectories when parallel)
        output_dir: Directory for output files
        format_name: Registered sink format
        file_pattern: Entry name regex
        zip_pattern: Archive name regex
        tags: Catalogue entries ('alias:Local[#text]'), configured catalogue if empty
        window_start: Period window lower bound
        window_end: Period window upper bound
        compare_instant: Window compares instants
        ignore_sign: Report absolute values
        dedupe: Drop duplicate (company, account, context) records
        registry_path: Companies House CSV for enrichment
        log_dir: Log directory for worker processes
        log_level: Log level for worker processes
    """
    directory: Path
    output_dir: Path
    format_name: str = 'csv'
    file_pattern: Optional[str] = None
    zip_pattern: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    window_start: Optional[str] = None
    window_end: Optional[str] = None
    compare_instant: bool = False
    ignore_sign: bool = False
    dedupe: bool = False
    registry_path: Optional[Path] = None
    log_dir: Optional[Path] = None
    log_level: str = 'INFO'

    def build_filter(self) -> Optional[AccountFilter]:
        """AccountFilter for the job's options, None when nothing filters."""
        window = None
        if self.window_start is not None and self.window_end is not None:
            window = PeriodWindow(self.window_start, self.window_end, self.compare_instant)

        record_filter = AccountFilter(
            window=window,
            deduplicator=AccountDeduplicator() if self.dedupe else None,
            ignore_sign=self.ignore_sign,
        )
        return None if record_filter.is_noop() else record_filter

    def build_catalogue(self, config: ConfigLoader) -> list[AccountTag]:
        if self.tags:
            return parse_tag_list(self.tags)
        return load_catalogue(config)

    def build_registry(self) -> Optional[CompanyRegistry]:
        if self.registry_path is None:
            return None
        return CsvCompanyRegistry.load(self.registry_path)

    @property
    def fields(self) -> tuple[str, ...]:
        return ENRICHED_FIELDS if self.registry_path is not None else RECORD_FIELDS

    def compile(self, pattern: Optional[str]) -> Optional[re.Pattern]:
        return re.compile(pattern) if pattern else None


def run_job(
    job: BatchJob,
    worker_id: Optional[int] = None,
    config: Optional[ConfigLoader] = None
) -> BatchStatistics:
    """
    Run a job in this process.

    With a worker_id the job reads '<directory>/<worker_id>' and writes
    'accounts_<worker_id>_<timestamp>.<ext>'.

    Args:
        job: Batch job
        worker_id: Worker number (None for a single-process run)
        config: Configuration loader

    Returns:
        BatchStatistics of this run
    """
    config = config or ConfigLoader()
    logger = get_input_logger('archive_processor')

    directory = Path(job.directory)
    if worker_id is not None:
        directory = directory / str(worker_id)
        if not directory.is_dir():
            logger.warning(f"[Worker{worker_id}]No directory {directory}, nothing to do")
            return BatchStatistics()

    with open_sink(job.format_name, job.output_dir, job.fields, worker_id) as sink:
        processor = ArchiveProcessor(
            sink,
            config=config,
            catalogue=job.build_catalogue(config),
            record_filter=job.build_filter(),
            registry=job.build_registry(),
            worker_id=worker_id,
        )
        return processor.process_directory(
            directory,
            job.compile(job.file_pattern),
            job.compile(job.zip_pattern),
        )


def _run_worker(job: BatchJob, worker_id: int) -> BatchStatistics:
    """Process pool entry point."""
    return run_job(job, worker_id)


def run_workers(job: BatchJob, workers: int) -> BatchStatistics:
    """
    Run a job over worker subdirectories 1..workers in parallel processes.

    Args:
        job: Batch job
        workers: Number of worker processes

    Returns:
        Merged BatchStatistics
    """
    total = BatchStatistics()

    with ProcessPoolExecutor(
        max_workers=workers,
        initializer=setup_ipo_logging,
        initargs=(job.log_dir, job.log_level, True),
    ) as executor:
        futures = [
            executor.submit(_run_worker, job, worker_id)
            for worker_id in range(1, workers + 1)
        ]
        for future in futures:
            total.merge(future.result())

    return total


__all__ = [
    'BatchStatistics',
    'ArchiveProcessor',
    'BatchJob',
    'run_job',
    'run_workers',
]
