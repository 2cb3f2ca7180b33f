# Path: tests/conftest.py
"""
Pytest Configuration and Shared Fixtures for uk_accounts

Provides common test fixtures used across all test modules, and small
builders for iXBRL and XBRL documents.
"""

import os
import sys
import tempfile
import zipfile
from pathlib import Path
from typing import Optional
from unittest.mock import MagicMock, patch

import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


# ==============================================================================
# NAMESPACE URIS
# ==============================================================================

XHTML_NS = 'http://www.w3.org/1999/xhtml'
IX_NS = 'http://www.xbrl.org/2013/inlineXBRL'
XBRLI_NS = 'http://www.xbrl.org/2003/instance'
XBRLDI_NS = 'http://xbrl.org/2006/xbrldi'
ISO4217_NS = 'http://www.xbrl.org/2003/iso4217'
CORE_NS = 'http://xbrl.frc.org.uk/fr/2021-01-01/core'
BUS_NS = 'http://xbrl.frc.org.uk/cd/2021-01-01/business'
AE_NS = 'http://www.companieshouse.gov.uk/ef/xbrl/uk/fr/gaap/ae/2009-09-01'
PT_NS = 'http://www.xbrl.org/uk/fr/gaap/pt/2004-12-01'

HTML_NAME = 'Prod223_2285_01234567_20230331.html'
XML_NAME = 'Prod224_0042_07654321_20100630.xml'


# ==============================================================================
# DOCUMENT BUILDERS
# ==============================================================================

def context_xml(
    ctx_id: str,
    start: Optional[str] = None,
    end: Optional[str] = None,
    instant: Optional[str] = None,
    forever: bool = False,
    member: Optional[str] = None,
    dimension: str = 'bus:EntityOfficersDimension',
    prefix: str = 'xbrli'
) -> str:
    """xbrli:context element."""
    p = f"{prefix}:" if prefix else ''
    segment = ''
    if member is not None:
        segment = (
            f'<{p}segment><xbrldi:explicitMember dimension="{dimension}">'
            f'{member}</xbrldi:explicitMember></{p}segment>'
        )

    period = ''
    if start is not None:
        period += f'<{p}startDate>{start}</{p}startDate>'
    if end is not None:
        period += f'<{p}endDate>{end}</{p}endDate>'
    if instant is not None:
        period += f'<{p}instant>{instant}</{p}instant>'
    if forever:
        period += f'<{p}forever/>'

    return (
        f'<{p}context id="{ctx_id}">'
        f'<{p}entity><{p}identifier scheme="http://www.companieshouse.gov.uk/">01234567</{p}identifier>'
        f'{segment}</{p}entity>'
        f'<{p}period>{period}</{p}period>'
        f'</{p}context>'
    )


def unit_xml(unit_id: str, measure: str, prefix: str = 'xbrli') -> str:
    """xbrli:unit element with one measure."""
    p = f"{prefix}:" if prefix else ''
    return f'<{p}unit id="{unit_id}"><{p}measure>{measure}</{p}measure></{p}unit>'


def non_fraction(
    name: str,
    context: str,
    unit: Optional[str],
    text: str,
    scale: Optional[str] = None,
    sign: Optional[str] = None
) -> str:
    """ix:nonFraction element."""
    attrs = f'name="{name}" contextRef="{context}"'
    if unit is not None:
        attrs += f' unitRef="{unit}"'
    attrs += ' decimals="0" format="ixt2:numdotdecimal"'
    if scale is not None:
        attrs += f' scale="{scale}"'
    if sign is not None:
        attrs += f' sign="{sign}"'
    return f'<ix:nonFraction {attrs}>{text}</ix:nonFraction>'


def non_numeric(name: str, context: str, text: str) -> str:
    """ix:nonNumeric element."""
    return f'<ix:nonNumeric name="{name}" contextRef="{context}">{text}</ix:nonNumeric>'


def make_ixbrl(resources: str, body: str = '', core_prefix: str = 'core') -> bytes:
    """Inline XBRL document bytes."""
    return f'''<?xml version="1.0" encoding="UTF-8"?>
<html xmlns="{XHTML_NS}"
      xmlns:ix="{IX_NS}"
      xmlns:ixt2="http://www.xbrl.org/inlineXBRL/transformation/2011-07-31"
      xmlns:xbrli="{XBRLI_NS}"
      xmlns:xbrldi="{XBRLDI_NS}"
      xmlns:iso4217="{ISO4217_NS}"
      xmlns:{core_prefix}="{CORE_NS}"
      xmlns:bus="{BUS_NS}">
<head><title>Annual accounts</title></head>
<body>
<div style="display:none"><ix:header><ix:resources>
{resources}
</ix:resources></ix:header></div>
<div>
{body}
</div>
</body>
</html>'''.encode('utf-8')


def make_xbrl(content: str) -> bytes:
    """Plain XBRL instance bytes."""
    return f'''<?xml version="1.0" encoding="UTF-8"?>
<xbrli:xbrl xmlns:xbrli="{XBRLI_NS}"
            xmlns:xbrldi="{XBRLDI_NS}"
            xmlns:iso4217="{ISO4217_NS}"
            xmlns:ae="{AE_NS}"
            xmlns:pt="{PT_NS}">
{content}
</xbrli:xbrl>'''.encode('utf-8')


SAMPLE_RESOURCES = ''.join([
    context_xml('C0', start='2022-04-01', end='2023-03-31'),
    context_xml('I1', instant='2023-03-31'),
    context_xml('C1', start='2022-04-01', end='2023-03-31', member='bus:Director1'),
    context_xml('C2', instant='2023-03-31', member='bus:Director1'),
    unit_xml('U1', 'iso4217:GBP'),
    unit_xml('U2', 'xbrli:pure'),
])

SAMPLE_BODY = ''.join([
    non_numeric('bus:UKCompaniesHouseRegisteredNumber', 'C0', '01234567'),
    non_numeric('bus:EntityCurrentLegalOrRegisteredName', 'C0', 'Example Trading Limited'),
    non_numeric('bus:NameEntityOfficer', 'C2', 'Director A'),
    non_fraction('core:DividendsPaid', 'C1', 'U1', '5,000'),
    non_fraction('core:TurnoverRevenue', 'C0', 'U1', '1,234', scale='3'),
    non_fraction('core:FixedAssets', 'I1', 'U1', '12,500'),
])

SAMPLE_XBRL_CONTENT = ''.join([
    context_xml('C0', start='2009-07-01', end='2010-06-30'),
    context_xml('I1', instant='2010-06-30'),
    unit_xml('GBP', 'iso4217:GBP'),
    '<ae:CompaniesHouseRegisteredNumber contextRef="C0">07654321</ae:CompaniesHouseRegisteredNumber>',
    '<pt:FixedAssets contextRef="I1" unitRef="GBP" decimals="0">-1,500</pt:FixedAssets>',
    '<pt:TurnoverGrossOperatingRevenue contextRef="C0" unitRef="GBP" decimals="0">98,000</pt:TurnoverGrossOperatingRevenue>',
])


def make_archive(path: Path, entries: dict[str, bytes]) -> Path:
    """Write a zip archive with the given entries in order."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, 'w') as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return path


# ==============================================================================
# ENVIRONMENT FIXTURES
# ==============================================================================

@pytest.fixture
def mock_env_vars(temp_dir):
    """Provide mock environment variables for testing."""
    env_vars = {
        'UK_ACCOUNTS_ENVIRONMENT': 'test',
        'UK_ACCOUNTS_DEBUG': 'true',
        'UK_ACCOUNTS_LOG_LEVEL': 'DEBUG',
        'UK_ACCOUNTS_OUTPUT_DIR': str(temp_dir / 'output'),
        'UK_ACCOUNTS_OUTPUT_FORMAT': 'JSON',
        'UK_ACCOUNTS_FAILED_DOCUMENTS_DIR': str(temp_dir / 'failed'),
        'UK_ACCOUNTS_INDIVIDUAL_NAME_TAG': 'bus:NameEntityOfficer',
        'UK_ACCOUNTS_ACCOUNT_TAGS': 'core:DividendsPaid, bus:EntityCurrentLegalOrRegisteredName#text',
        'UK_ACCOUNTS_WORKERS': '4',
        'UK_ACCOUNTS_HUGE_TREE': 'no',
    }

    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ==============================================================================
# MOCK FIXTURES
# ==============================================================================

@pytest.fixture
def config_values(temp_dir):
    """Configuration values behind mock_config (tests may update them)."""
    return {
        'environment': 'test',
        'debug': True,
        'log_dir': None,
        'log_level': 'DEBUG',
        'output_dir': temp_dir / 'output',
        'output_format': 'csv',
        'failed_documents_dir': temp_dir / 'failed',
        'individual_name_tag': 'bus:NameEntityOfficer',
        'account_tags': [],
        'huge_tree': True,
        'workers': 1,
        'company_registry_path': None,
    }


@pytest.fixture
def mock_config(config_values):
    """Create a mock ConfigLoader for testing."""
    config = MagicMock()
    config.get.side_effect = lambda key, default=None: config_values.get(key, default)
    return config


@pytest.fixture
def errors():
    """Fresh diagnostics collection."""
    from uk_accounts.models.error import ErrorCollection
    return ErrorCollection()


# ==============================================================================
# DOCUMENT FIXTURES
# ==============================================================================

@pytest.fixture
def sample_ixbrl():
    """Inline XBRL document with contexts, units and a dimensional dividend."""
    return make_ixbrl(SAMPLE_RESOURCES, SAMPLE_BODY)


@pytest.fixture
def sample_xbrl():
    """Legacy UK GAAP XBRL instance."""
    return make_xbrl(SAMPLE_XBRL_CONTENT)


@pytest.fixture
def parsed_document(mock_config, errors):
    """Factory: PARSED AccountsDocument for raw bytes."""
    from uk_accounts.document import AccountsDocument

    def build(data: bytes, filename: str = HTML_NAME):
        document = AccountsDocument(data, filename, config=mock_config, errors=errors)
        assert document.parse(), [str(e) for e in errors]
        return document

    return build


# ==============================================================================
# UTILITY FIXTURES
# ==============================================================================

@pytest.fixture
def capture_logs():
    """Capture log output for testing."""
    import logging
    from io import StringIO

    log_capture = StringIO()
    handler = logging.StreamHandler(log_capture)
    handler.setLevel(logging.DEBUG)

    root_logger = logging.getLogger()
    previous_level = root_logger.level
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(handler)

    yield log_capture

    root_logger.removeHandler(handler)
    root_logger.setLevel(previous_level)


@pytest.fixture
def reset_singletons():
    """Reset any singleton instances between tests."""
    from uk_accounts.config_loader import ConfigLoader
    ConfigLoader._instance = None
    ConfigLoader._initialized = False

    yield

    ConfigLoader._instance = None
    ConfigLoader._initialized = False
