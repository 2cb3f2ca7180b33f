# Path: uk_accounts/config_loader.py
"""
Configuration Loader for uk_accounts

Loads configuration from .env file for the accounts extraction system.
Singleton pattern ensures consistent configuration across all components.

NO hardcoded paths, NO magic numbers.
All configuration comes from environment variables, with defaults below.
"""

import os
from typing import Optional, Any
from pathlib import Path
from dotenv import load_dotenv


# ==============================================================================
# DEFAULT CONFIGURATION VALUES
# ==============================================================================

# Logging Defaults
DEFAULT_LOG_LEVEL: str = 'INFO'

# Output Defaults
DEFAULT_OUTPUT_DIR: str = '.'
DEFAULT_OUTPUT_FORMAT: str = 'csv'
DEFAULT_FAILED_DOCUMENTS_DIR: str = 'failed_documents'

# Extraction Defaults
DEFAULT_INDIVIDUAL_NAME_TAG: str = 'bus:NameEntityOfficer'

# Performance Defaults
DEFAULT_WORKERS: int = 1

ENV_PREFIX: str = 'UK_ACCOUNTS_'


class ConfigLoader:
    """
    Singleton configuration loader for uk_accounts.

    Loads configuration from environment variables with type conversion
    and sensible defaults. Nothing is required: a bare environment gives
    console logging, CSV output in the working directory and the built-in
    account catalogue.

    Example:
        config = ConfigLoader()
        failed_dir = config.get('failed_documents_dir')  # Returns Path object
        workers = config.get('workers')  # Returns int
    """

    _instance: Optional['ConfigLoader'] = None
    _initialized: bool = False

    def __new__(cls) -> 'ConfigLoader':
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """
        Initialize configuration loader.

        Only runs once due to singleton pattern. Loads .env from the
        working directory first, then from the project root.
        """
        if ConfigLoader._initialized:
            return

        cwd_env = Path.cwd() / '.env'
        project_env = Path(__file__).resolve().parent.parent / '.env'

        for env_path in (cwd_env, project_env):
            if env_path.exists():
                load_dotenv(dotenv_path=env_path, interpolate=True)
                break

        self._config = self._load_configuration()
        ConfigLoader._initialized = True

    def _load_configuration(self) -> dict[str, Any]:
        """
        Load all configuration from environment.

        Returns:
            Dictionary of configuration values with proper types
        """
        config = {
            # ================================================================
            # ENVIRONMENT & DEBUG
            # ================================================================
            'environment': self._get_env('ENVIRONMENT', 'development'),
            'debug': self._get_bool('DEBUG', False),

            # ================================================================
            # LOGGING CONFIGURATION
            # ================================================================
            'log_dir': self._get_path('LOG_DIR'),
            'log_level': self._get_env('LOG_LEVEL', DEFAULT_LOG_LEVEL),
            'log_console': self._get_bool('LOG_CONSOLE', True),

            # ================================================================
            # OUTPUT CONFIGURATION
            # ================================================================
            'output_dir': self._get_path('OUTPUT_DIR') or Path(DEFAULT_OUTPUT_DIR),
            'output_format': self._get_env('OUTPUT_FORMAT', DEFAULT_OUTPUT_FORMAT).lower(),
            'failed_documents_dir': (
                self._get_path('FAILED_DOCUMENTS_DIR')
                or Path(DEFAULT_FAILED_DOCUMENTS_DIR)
            ),

            # ================================================================
            # EXTRACTION CONFIGURATION
            # ================================================================
            'individual_name_tag': self._get_env(
                'INDIVIDUAL_NAME_TAG', DEFAULT_INDIVIDUAL_NAME_TAG
            ),
            'account_tags': self._get_list('ACCOUNT_TAGS'),
            'huge_tree': self._get_bool('HUGE_TREE', True),

            # ================================================================
            # BATCH CONFIGURATION
            # ================================================================
            'workers': self._get_int('WORKERS', DEFAULT_WORKERS),
            'company_registry_path': self._get_path('COMPANY_REGISTRY_PATH'),
        }

        return config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return self._config.get(key, default)

    def _get_path(self, key: str, required: bool = False) -> Optional[Path]:
        """
        Get path from environment variable.

        Args:
            key: Environment variable name (without prefix)
            required: If True, raise error when missing

        Returns:
            Path object or None

        Raises:
            ValueError: If required and missing
        """
        value = os.getenv(ENV_PREFIX + key)

        if not value:
            if required:
                raise ValueError(f"Required path not configured: {ENV_PREFIX}{key}")
            return None

        # Handle variable interpolation
        if '${' in value:
            value = os.path.expandvars(value)

        return Path(value)

    def _get_env(self, key: str, default: str = '') -> str:
        """Get string environment variable."""
        return os.getenv(ENV_PREFIX + key, default)

    def _get_int(self, key: str, default: int) -> int:
        """Get integer environment variable."""
        value = os.getenv(ENV_PREFIX + key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    def _get_bool(self, key: str, default: bool) -> bool:
        """Get boolean environment variable."""
        value = os.getenv(ENV_PREFIX + key)
        if value is None:
            return default
        return value.lower() in ('true', '1', 'yes', 'on')

    def _get_list(self, key: str) -> list[str]:
        """Get comma-separated list environment variable."""
        value = os.getenv(ENV_PREFIX + key, '')
        return [item.strip() for item in value.split(',') if item.strip()]

    def __repr__(self) -> str:
        """String representation showing key settings."""
        return (
            f"ConfigLoader("
            f"environment={self._config.get('environment')}, "
            f"output_format={self._config.get('output_format')})"
        )


__all__ = ['ConfigLoader']
