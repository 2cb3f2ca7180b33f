# Path: tests/unit/test_config_loader.py
"""
Unit Tests for config_loader.py

Tests the ConfigLoader singleton including:
- Singleton behavior
- Environment variable loading
- Type conversion
- Defaults for a bare environment
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest


class TestConfigLoaderSingleton:
    """Test singleton pattern implementation."""

    def test_singleton_returns_same_instance(self, reset_singletons):
        """Multiple calls should return the same instance."""
        from uk_accounts.config_loader import ConfigLoader

        config1 = ConfigLoader()
        config2 = ConfigLoader()

        assert config1 is config2

    def test_singleton_initializes_once(self, reset_singletons, mock_env_vars):
        """Configuration should be read only on first construction."""
        from uk_accounts.config_loader import ConfigLoader

        config = ConfigLoader()
        with patch.dict(os.environ, {'UK_ACCOUNTS_WORKERS': '9'}):
            assert ConfigLoader().get('workers') == config.get('workers') == 4


class TestConfigLoaderValues:
    """Test values loaded from the environment."""

    def test_loads_env_values(self, reset_singletons, mock_env_vars, temp_dir):
        """Prefixed variables should be loaded with their types."""
        from uk_accounts.config_loader import ConfigLoader

        config = ConfigLoader()

        assert config.get('environment') == 'test'
        assert config.get('debug') is True
        assert config.get('workers') == 4
        assert config.get('huge_tree') is False
        assert config.get('failed_documents_dir') == temp_dir / 'failed'
        assert config.get('individual_name_tag') == 'bus:NameEntityOfficer'

    def test_output_format_is_lowercased(self, reset_singletons, mock_env_vars):
        """Output format should be case-insensitive."""
        from uk_accounts.config_loader import ConfigLoader

        assert ConfigLoader().get('output_format') == 'json'

    def test_account_tags_split_on_commas(self, reset_singletons, mock_env_vars):
        """Catalogue entries should be split and stripped."""
        from uk_accounts.config_loader import ConfigLoader

        assert ConfigLoader().get('account_tags') == [
            'core:DividendsPaid',
            'bus:EntityCurrentLegalOrRegisteredName#text',
        ]

    def test_invalid_int_falls_back_to_default(self, reset_singletons):
        """Unparseable integers should use the default."""
        from uk_accounts.config_loader import ConfigLoader

        with patch.dict(os.environ, {'UK_ACCOUNTS_WORKERS': 'many'}):
            assert ConfigLoader().get('workers') == 1

    def test_missing_key_returns_default(self, reset_singletons):
        """Unknown keys should return the given default."""
        from uk_accounts.config_loader import ConfigLoader

        assert ConfigLoader().get('no_such_key', 'fallback') == 'fallback'


class TestConfigLoaderDefaults:
    """Test defaults with no UK_ACCOUNTS_* variables set."""

    @pytest.fixture
    def bare_environment(self):
        """Environment without any UK_ACCOUNTS_* variable."""
        cleaned = {k: v for k, v in os.environ.items() if not k.startswith('UK_ACCOUNTS_')}
        with patch.dict(os.environ, cleaned, clear=True), \
                patch('uk_accounts.config_loader.load_dotenv'):
            yield

    def test_defaults(self, reset_singletons, bare_environment):
        """A bare environment should still give a working configuration."""
        from uk_accounts.config_loader import ConfigLoader

        config = ConfigLoader()

        assert config.get('output_dir') == Path('.')
        assert config.get('output_format') == 'csv'
        assert config.get('failed_documents_dir') == Path('failed_documents')
        assert config.get('individual_name_tag') == 'bus:NameEntityOfficer'
        assert config.get('account_tags') == []
        assert config.get('workers') == 1
        assert config.get('log_dir') is None
        assert config.get('company_registry_path') is None

    def test_repr(self, reset_singletons, bare_environment):
        """repr should name environment and format."""
        from uk_accounts.config_loader import ConfigLoader

        text = repr(ConfigLoader())
        assert 'environment=development' in text
        assert 'output_format=csv' in text
