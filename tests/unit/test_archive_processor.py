# Path: tests/unit/test_archive_processor.py
"""
Unit Tests for batch/

Tests:
- Progress store persistence
- Archive iteration, resume and entry patterns
- Corrupt archives
- Single-process and worker jobs
"""

import csv
import json
import re
from unittest.mock import patch

import pytest

from uk_accounts.batch.archive_processor import (
    ArchiveProcessor,
    BatchJob,
    BatchStatistics,
    run_job,
)
from uk_accounts.batch.progress import ProgressStore, PROGRESS_VERSION
from uk_accounts.catalogue import parse_tag_list
from uk_accounts.document import AccountsDocument
from uk_accounts.output.sinks import ListRecordSink
from uk_accounts.reporting.account_filter import AccountDeduplicator, AccountFilter
from uk_accounts.reporting.company_registry import CompanyInfo, CompanyRegistry

from tests.conftest import (
    HTML_NAME,
    SAMPLE_BODY,
    SAMPLE_RESOURCES,
    XML_NAME,
    make_archive,
    make_ixbrl,
    non_fraction,
)


CATALOGUE = parse_tag_list(['core:DividendsPaid', 'pt:FixedAssets'])


class TestProgressStore:
    """Test progress persistence."""

    def test_nothing_processed(self, temp_dir):
        """A new archive starts at -1."""
        store = ProgressStore(temp_dir / 'a.zip')

        assert store.processed == -1
        assert not store.is_done(0)
        assert store.path.name == 'a.zip.progress.json'

    def test_mark_and_reload(self, temp_dir):
        """Marked progress survives a new store."""
        ProgressStore(temp_dir / 'a.zip').mark(4)
        store = ProgressStore(temp_dir / 'a.zip')

        assert store.processed == 4
        assert store.is_done(4)
        assert not store.is_done(5)
        data = json.loads(store.path.read_text())
        assert data['version'] == PROGRESS_VERSION
        assert not list(temp_dir.glob('*.tmp'))

    def test_unreadable_file(self, temp_dir):
        """A corrupt progress file counts as no progress."""
        (temp_dir / 'a.zip.progress.json').write_text('{not json')

        assert ProgressStore(temp_dir / 'a.zip').processed == -1

    def test_reset(self, temp_dir):
        """reset() removes the file."""
        store = ProgressStore(temp_dir / 'a.zip')
        store.mark(1)
        store.reset()

        assert store.processed == -1
        assert not store.path.exists()


class TestArchiveProcessor:
    """Test archive processing into a sink."""

    def _archive(self, temp_dir, name='Accounts_Bulk_Data-2023-03-31.zip'):
        return make_archive(temp_dir / 'in' / name, {
            HTML_NAME: make_ixbrl(SAMPLE_RESOURCES, SAMPLE_BODY),
            'Prod223_2285_00000001_20230331.html': b'<html><unclosed>',
            'notes.txt': b'not a filing',
        })

    def test_process_archive(self, temp_dir, mock_config):
        """Documents are parsed, failed or skipped and counted."""
        sink = ListRecordSink()
        processor = ArchiveProcessor(sink, config=mock_config, catalogue=CATALOGUE)

        stats = processor.process_archive(self._archive(temp_dir))

        assert stats.archives_processed == 1
        assert stats.documents_parsed == 1
        assert stats.documents_failed == 1
        assert stats.documents_unsupported == 1
        assert stats.records_emitted == 1
        assert stats.diagnostics == {'XML_MALFORMED': 1}
        assert sink.records[0].value == 5000
        assert (temp_dir / 'failed' / 'Prod223_2285_00000001_20230331.html').exists()

    def test_resume(self, temp_dir, mock_config):
        """A second run skips entries already processed."""
        zip_path = self._archive(temp_dir)
        ArchiveProcessor(ListRecordSink(), config=mock_config, catalogue=CATALOGUE) \
            .process_archive(zip_path)

        sink = ListRecordSink()
        stats = ArchiveProcessor(sink, config=mock_config, catalogue=CATALOGUE) \
            .process_archive(zip_path)

        assert stats.documents_skipped == 3
        assert stats.documents_parsed == 0
        assert sink.records == []

    def test_resume_after_partial_run(self, temp_dir, mock_config):
        """Progress marks where the next run starts."""
        zip_path = self._archive(temp_dir)
        ProgressStore(zip_path).mark(0)

        sink = ListRecordSink()
        stats = ArchiveProcessor(sink, config=mock_config, catalogue=CATALOGUE) \
            .process_archive(zip_path)

        assert stats.documents_skipped == 1
        assert stats.documents_failed == 1
        assert sink.records == []
        assert ProgressStore(zip_path).processed == 2

    def test_file_pattern(self, temp_dir, mock_config):
        """Entries not matching the pattern are skipped and left unmarked."""
        zip_path = self._archive(temp_dir)

        stats = ArchiveProcessor(ListRecordSink(), config=mock_config, catalogue=CATALOGUE) \
            .process_archive(zip_path, re.compile('01234567'))

        assert stats.documents_parsed == 1
        assert stats.documents_skipped == 2
        assert ProgressStore(zip_path).processed == 0

    def test_pattern_skips_behind_progress(self, temp_dir, mock_config):
        """Entries skipped by pattern before a processed entry count as done."""
        zip_path = self._archive(temp_dir)
        ArchiveProcessor(ListRecordSink(), config=mock_config, catalogue=CATALOGUE) \
            .process_archive(zip_path, re.compile(r'\.txt$'))

        sink = ListRecordSink()
        stats = ArchiveProcessor(sink, config=mock_config, catalogue=CATALOGUE) \
            .process_archive(zip_path)

        assert ProgressStore(zip_path).processed == 2
        assert stats.documents_skipped == 3
        assert stats.documents_parsed == 0
        assert sink.records == []

    def test_corrupt_archive(self, temp_dir, mock_config):
        """An unreadable archive is reported and the batch continues."""
        directory = temp_dir / 'in'
        directory.mkdir()
        (directory / 'a_broken.zip').write_bytes(b'PK\x03\x04 this is not a zip')
        self._archive(temp_dir, 'b_good.zip')
        seen = []

        processor = ArchiveProcessor(ListRecordSink(), config=mock_config,
                                     catalogue=CATALOGUE, listener=seen.append)
        stats = processor.process_directory(directory)

        assert stats.archives_failed == 1
        assert stats.archives_processed == 1
        assert stats.diagnostics['ARCHIVE_UNREADABLE'] == 1
        assert [e.category.value for e in seen].count('ARCHIVE_UNREADABLE') == 1

    def test_zip_pattern(self, temp_dir, mock_config):
        """Archives not matching the pattern are not opened."""
        self._archive(temp_dir, 'Accounts_2022.zip')
        self._archive(temp_dir, 'Accounts_2023.zip')

        stats = ArchiveProcessor(ListRecordSink(), config=mock_config, catalogue=CATALOGUE) \
            .process_directory(temp_dir / 'in', zip_pattern=re.compile('2023'))

        assert stats.archives_processed == 1
        assert not (temp_dir / 'in' / 'Accounts_2022.zip.progress.json').exists()

    def test_filter_and_registry(self, temp_dir, mock_config):
        """Records are filtered and enriched before the sink."""
        zip_path = make_archive(temp_dir / 'in' / 'a.zip', {
            HTML_NAME: make_ixbrl(SAMPLE_RESOURCES, SAMPLE_BODY),
            'copy/' + HTML_NAME: make_ixbrl(SAMPLE_RESOURCES, SAMPLE_BODY),
        })
        sink = ListRecordSink()
        registry = CompanyRegistry({'01234567': CompanyInfo('United Kingdom', 'SMALL')})

        stats = ArchiveProcessor(
            sink,
            config=mock_config,
            catalogue=CATALOGUE,
            record_filter=AccountFilter(deduplicator=AccountDeduplicator()),
            registry=registry,
        ).process_archive(zip_path)

        assert stats.records_emitted == 1
        assert stats.diagnostics == {'DUPLICATE_ENTRY': 1}
        assert sink.records[0]['account_category'] == 'SMALL'
        assert sink.records[0]['segment_label'] == 'Director A'

    def test_extraction_error_is_contained(self, temp_dir, mock_config):
        """An error while extracting one document fails that document only."""
        zip_path = make_archive(temp_dir / 'in' / 'a.zip', {
            HTML_NAME: make_ixbrl(SAMPLE_RESOURCES, SAMPLE_BODY),
            'copy/' + HTML_NAME: make_ixbrl(SAMPLE_RESOURCES, SAMPLE_BODY),
        })
        seen = []
        processor = ArchiveProcessor(ListRecordSink(), config=mock_config,
                                     catalogue=CATALOGUE, listener=seen.append)

        with patch.object(AccountsDocument, 'extract_accounts',
                          side_effect=[ValueError('bad figure'), []]):
            stats = processor.process_archive(zip_path)

        assert stats.documents_failed == 1
        assert stats.documents_parsed == 1
        assert stats.archives_processed == 1
        assert stats.diagnostics == {'EXTRACTION_FAILED': 1}
        [error] = seen
        assert error.source_file == HTML_NAME
        assert ProgressStore(zip_path).processed == 1

    def test_oversized_figures_reach_csv(self, temp_dir, mock_config):
        """Overlong figures and scales are reported and still written."""
        body = (
            non_fraction('core:DividendsPaid', 'C1', 'U1', '1' * 5000)
            + non_fraction('core:DividendsPaid', 'C1', 'U1', '1', scale='5000')
        )
        make_archive(temp_dir / 'in' / 'a.zip', {HTML_NAME: make_ixbrl(SAMPLE_RESOURCES, body)})
        job = BatchJob(directory=temp_dir / 'in', output_dir=temp_dir / 'out',
                       tags=['core:DividendsPaid'])

        stats = run_job(job, config=mock_config)

        [output] = list((temp_dir / 'out').glob('accounts_*.csv'))
        with open(output, newline='', encoding='utf-8') as f:
            rows = list(csv.DictReader(f))
        assert [row['value'] for row in rows] == ['', '1']
        assert stats.diagnostics == {'INVALID_VALUE': 1, 'INVALID_SCALE': 1}

    def test_sink_error_is_not_an_archive_error(self, temp_dir, mock_config):
        """A failing sink propagates instead of being reported as ARCHIVE_UNREADABLE."""
        class FullDiskSink(ListRecordSink):
            def write(self, record):
                raise OSError(28, 'No space left on device')

        zip_path = make_archive(temp_dir / 'in' / 'a.zip', {
            HTML_NAME: make_ixbrl(SAMPLE_RESOURCES, SAMPLE_BODY),
        })
        processor = ArchiveProcessor(FullDiskSink(), config=mock_config, catalogue=CATALOGUE)

        with pytest.raises(OSError, match='No space left'):
            processor.process_archive(zip_path)

        assert processor.statistics.archives_failed == 0
        assert 'ARCHIVE_UNREADABLE' not in processor.statistics.diagnostics
        assert ProgressStore(zip_path).processed == -1


class TestBatchJobs:
    """Test job runs with file output."""

    def test_run_job(self, temp_dir, mock_config):
        """A single-process job writes one CSV file."""
        make_archive(temp_dir / 'in' / 'a.zip', {HTML_NAME: make_ixbrl(SAMPLE_RESOURCES, SAMPLE_BODY)})
        job = BatchJob(directory=temp_dir / 'in', output_dir=temp_dir / 'out',
                       tags=['core:DividendsPaid'])

        stats = run_job(job, config=mock_config)

        [output] = list((temp_dir / 'out').glob('accounts_*.csv'))
        with open(output, newline='', encoding='utf-8') as f:
            rows = list(csv.DictReader(f))
        assert stats.records_emitted == 1
        assert rows[0]['registered_number'] == '01234567'
        assert rows[0]['value'] == '5000'

    def test_worker_subdirectory(self, temp_dir, mock_config):
        """A worker reads its numbered subdirectory and names its output."""
        make_archive(temp_dir / 'in' / '2' / 'a.zip', {XML_NAME: b'<broken'})
        job = BatchJob(directory=temp_dir / 'in', output_dir=temp_dir / 'out', format_name='json')

        stats = run_job(job, worker_id=2, config=mock_config)

        assert stats.documents_failed == 1
        assert list((temp_dir / 'out').glob('accounts_2_*.json'))

    def test_missing_worker_directory(self, temp_dir, mock_config):
        """A worker without a subdirectory does nothing."""
        job = BatchJob(directory=temp_dir, output_dir=temp_dir / 'out')

        stats = run_job(job, worker_id=7, config=mock_config)

        assert stats.to_dict() == BatchStatistics().to_dict()
        assert not (temp_dir / 'out').exists()

    def test_build_filter(self, temp_dir):
        """Job options map onto an AccountFilter."""
        assert BatchJob(directory=temp_dir, output_dir=temp_dir).build_filter() is None

        record_filter = BatchJob(
            directory=temp_dir, output_dir=temp_dir,
            window_start='2017-12-31', window_end='2019-01-01', dedupe=True,
        ).build_filter()
        assert record_filter.window.start == '2017-12-31'
        assert record_filter.deduplicator is not None

    def test_statistics_merge(self):
        """Worker statistics add up."""
        total = BatchStatistics(records_emitted=2, diagnostics={'MISSING_UNIT': 1})
        total.merge(BatchStatistics(records_emitted=3, diagnostics={'MISSING_UNIT': 2, 'MISSING_FACT': 1}))

        assert total.records_emitted == 5
        assert total.diagnostics == {'MISSING_UNIT': 3, 'MISSING_FACT': 1}
