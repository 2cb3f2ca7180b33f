# Path: tests/unit/test_document.py
"""
Unit Tests for document.py

Tests the per-document orchestrator:
- State transitions
- Malformed documents kept for inspection
- Unsupported suffixes
- Company number lookup and filename fallback
- Catalogue extraction and emission
"""

import pytest

from uk_accounts.catalogue import AccountTag, parse_tag_list
from uk_accounts.document import AccountsDocument, DocumentState
from uk_accounts.foundation.namespace_resolver import NamespaceRole
from uk_accounts.models.error import ErrorCategory
from uk_accounts.output.sinks import ListRecordSink

from tests.conftest import (
    CORE_NS,
    HTML_NAME,
    SAMPLE_BODY,
    SAMPLE_RESOURCES,
    XML_NAME,
    make_ixbrl,
    non_fraction,
)


class TestParseStates:
    """Test parse() outcomes."""

    def test_parsed(self, mock_config, errors, sample_ixbrl):
        """A well-formed iXBRL document reaches PARSED."""
        document = AccountsDocument(sample_ixbrl, HTML_NAME, config=mock_config, errors=errors)

        assert document.state == DocumentState.UNPARSED
        assert document.parse() is True
        assert document.state == DocumentState.PARSED
        assert set(document.tables.contexts) == {'C0', 'I1', 'C1', 'C2'}
        assert document.tables.units == {'U1': 'GBP', 'U2': ''}

    def test_parse_is_idempotent(self, mock_config, sample_ixbrl):
        """A second parse() returns the first outcome without work."""
        document = AccountsDocument(sample_ixbrl, HTML_NAME, config=mock_config)
        document.parse()
        tables = document.tables

        assert document.parse() is True
        assert document.tables is tables

    def test_malformed_document(self, mock_config, errors, temp_dir):
        """Malformed markup ends PARSE_FAILED and the bytes are kept."""
        data = b'<html><body><ix:nonFraction></body>'
        document = AccountsDocument(data, 'archive/dir/' + HTML_NAME, config=mock_config, errors=errors)

        assert document.parse() is False
        assert document.state == DocumentState.PARSE_FAILED
        assert len(errors.get_by_category(ErrorCategory.XML_MALFORMED)) >= 1
        assert errors.has_errors()

        kept = temp_dir / 'failed' / HTML_NAME
        assert kept.read_bytes() == data

    def test_malformed_document_not_retried(self, mock_config, errors):
        """parse() after a failure reports the failure again without new diagnostics."""
        document = AccountsDocument(b'<oops', HTML_NAME, config=mock_config, errors=errors)
        document.parse()
        count = len(errors)

        assert document.parse() is False
        assert len(errors) == count

    def test_unsupported_suffix(self, mock_config, errors):
        """Unknown suffixes are skipped, not failed."""
        document = AccountsDocument(b'%PDF-1.4', 'Prod223_2285_01234567_20230331.pdf',
                                    config=mock_config, errors=errors)

        assert document.parse() is False
        assert document.state == DocumentState.UNPARSED
        assert len(errors) == 0

    def test_extract_before_parse(self, mock_config, sample_ixbrl):
        """Extraction needs a PARSED document."""
        document = AccountsDocument(sample_ixbrl, HTML_NAME, config=mock_config)

        with pytest.raises(RuntimeError, match='PARSED'):
            document.extract_accounts([])


class TestCompanyNumber:
    """Test company number resolution."""

    def test_tagged_number(self, parsed_document, sample_ixbrl):
        """The tagged registered number is used."""
        document = parsed_document(sample_ixbrl, 'Prod223_2285_99999999_20230331.html')

        assert document.company_number == '01234567'

    def test_number_inside_formatting(self, parsed_document):
        """A number wrapped in formatting children is still found."""
        body = (
            '<ix:nonNumeric name="bus:UKCompaniesHouseRegisteredNumber" contextRef="C0">'
            '<span>0123</span><span>4567</span></ix:nonNumeric>'
        )
        document = parsed_document(make_ixbrl(SAMPLE_RESOURCES, body), 'x_99999999_20230331.html')

        assert document.company_number == '01234567'

    def test_filename_fallback(self, parsed_document):
        """Without a tagged number the filename supplies it."""
        document = parsed_document(make_ixbrl(SAMPLE_RESOURCES), 'Prod223_2285_07777777_20230331.html')

        assert document.company_number == '07777777'

    def test_xml_number(self, parsed_document, sample_xbrl):
        """Plain XBRL uses the Companies Act tag."""
        document = parsed_document(sample_xbrl, 'Prod224_0042_99999999_20100630.xml')

        assert document.company_number == '07654321'


class TestExtraction:
    """Test catalogue extraction."""

    def test_extract_accounts(self, parsed_document, sample_ixbrl):
        """Records carry company, period, filing date and label."""
        document = parsed_document(sample_ixbrl)

        [record] = document.extract_accounts(parse_tag_list(['core:DividendsPaid']))

        assert record.company_number == '01234567'
        assert record.account == 'DividendsPaid'
        assert record.segment_label == 'Director A'
        assert record.value == 5000
        assert record.unit == 'GBP'
        assert record.start_date == '2022-04-01'
        assert record.end_date == '2023-03-31'
        assert record.instant is None
        assert record.forever is False
        assert record.filing_date == '20230331'
        assert record.context_ref == 'C1'

    def test_catalogue_order(self, parsed_document, sample_ixbrl):
        """Records follow catalogue order."""
        document = parsed_document(sample_ixbrl)
        catalogue = parse_tag_list([
            'core:FixedAssets',
            'bus:EntityCurrentLegalOrRegisteredName#text',
            'core:DividendsPaid',
        ])

        records = document.extract_accounts(catalogue)

        assert [r.account for r in records] == [
            'FixedAssets', 'EntityCurrentLegalOrRegisteredName', 'DividendsPaid'
        ]
        assert records[1].value == 'Example Trading Limited'

    def test_custom_core_prefix(self, parsed_document):
        """Catalogue tags follow the document's own prefix."""
        body = non_fraction('uk-core:DividendsPaid', 'C1', 'U1', '42')
        data = make_ixbrl(SAMPLE_RESOURCES, body, core_prefix='uk-core')
        document = parsed_document(data)

        [record] = document.extract_accounts([AccountTag(NamespaceRole.CORE, 'DividendsPaid')])

        assert document.tables.ns.uri(NamespaceRole.CORE) == CORE_NS
        assert record.value == 42

    def test_absent_role_gives_no_records(self, parsed_document, sample_ixbrl):
        """Tags of a taxonomy the document does not use yield nothing."""
        document = parsed_document(sample_ixbrl)

        assert document.extract_accounts(parse_tag_list(['pt:FixedAssets'])) == []

    def test_default_catalogue(self, parsed_document, sample_ixbrl):
        """Without a catalogue the configured one (here the default) is used."""
        document = parsed_document(sample_ixbrl)

        accounts = {r.account for r in document.extract_accounts()}

        assert {'DividendsPaid', 'TurnoverRevenue', 'FixedAssets',
                'EntityCurrentLegalOrRegisteredName'} <= accounts

    def test_xml_records(self, parsed_document, sample_xbrl):
        """Legacy XBRL documents produce signed records."""
        document = parsed_document(sample_xbrl, XML_NAME)

        records = document.extract_accounts(parse_tag_list(['pt:FixedAssets']))

        assert [(r.company_number, r.value, r.instant, r.filing_date) for r in records] == [
            ('07654321', -1500, '2010-06-30', '20100630')
        ]

    def test_emit(self, parsed_document, sample_ixbrl):
        """emit() writes every record and returns the count."""
        document = parsed_document(make_ixbrl(SAMPLE_RESOURCES, SAMPLE_BODY))
        sink = ListRecordSink()

        count = document.emit(sink, parse_tag_list(['core:DividendsPaid', 'core:FixedAssets']))

        assert count == 2 == sink.count
