"""
uk_accounts Logger Package

IPO-aware logging for the accounts extraction system.

Provides separate log streams for:
- INPUT layer (archive reading, document loading)
- PROCESS layer (extraction, filtering)
- OUTPUT layer (record sinks)
"""

from .ipo_logging import (
    setup_ipo_logging,
    get_input_logger,
    get_process_logger,
    get_output_logger,
)

__all__ = [
    'setup_ipo_logging',
    'get_input_logger',
    'get_process_logger',
    'get_output_logger',
]
