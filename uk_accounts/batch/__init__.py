# Path: uk_accounts/batch/__init__.py
"""
Batch Processing

Resumable extraction over directories of bulk accounts archives.
"""

from .progress import ProgressStore
from .archive_processor import (
    BatchStatistics,
    ArchiveProcessor,
    BatchJob,
    run_job,
    run_workers,
)

__all__ = [
    'ProgressStore',
    'BatchStatistics',
    'ArchiveProcessor',
    'BatchJob',
    'run_job',
    'run_workers',
]
