# Path: uk_accounts/batch/progress.py
"""
Archive Progress Store

Resumable processing of bulk archives.

Each archive has a small JSON file beside it holding the index of the
last fully processed entry:

    Accounts_Bulk_Data-2023-03-31.zip.progress.json
    {"version": "1.0", "processed": 1041, "updated": "2023-04-02T10:15:00"}

The file is rewritten through a temporary file and os.replace() after
every entry, so an interrupted run leaves either the old or the new
index, never a truncated file.

The index is a high-water mark: every entry up to it counts as done,
including entries an earlier run skipped by file pattern.

Example:
    store = ProgressStore(Path("Accounts_Bulk_Data-2023-03-31.zip"))
    for i, entry in enumerate(entries):
        if i <= store.processed:
            continue
        ...
        store.mark(i)
"""

import json
import os
from datetime import datetime
from pathlib import Path

from ..constants import PROGRESS_SUFFIX, NOTHING_PROCESSED
from ..core.logger import get_input_logger


PROGRESS_VERSION = '1.0'


class ProgressStore:
    """
    Last processed entry index of one archive.

    Attributes:
        archive_path: Archive the progress belongs to
        path: Progress file path
        processed: Last fully processed entry index (-1 when none)
    """

    def __init__(self, archive_path: Path):
        """
        Initialize store and load existing progress.

        Args:
            archive_path: Archive path
        """
        self.logger = get_input_logger('progress')
        self.archive_path = Path(archive_path)
        self.path = self.archive_path.with_name(self.archive_path.name + PROGRESS_SUFFIX)
        self.processed = self._load()

    def _load(self) -> int:
        """Read stored index; unreadable files count as no progress."""
        if not self.path.exists():
            return NOTHING_PROCESSED

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.warning(f"Ignoring unreadable progress file {self.path}: {e}")
            return NOTHING_PROCESSED

        version = data.get('version')
        if version != PROGRESS_VERSION:
            self.logger.warning(
                f"Progress version mismatch: {version} != {PROGRESS_VERSION}"
            )

        processed = data.get('processed', NOTHING_PROCESSED)
        if not isinstance(processed, int):
            return NOTHING_PROCESSED
        return processed

    def is_done(self, index: int) -> bool:
        """Check if entry index was already processed."""
        return index <= self.processed

    def mark(self, index: int) -> None:
        """
        Persist index as the last processed entry.

        Args:
            index: Zero-based entry index
        """
        self.processed = index

        payload = {
            'version': PROGRESS_VERSION,
            'processed': index,
            'updated': datetime.now().isoformat(timespec='seconds'),
        }

        tmp_path = self.path.with_name(self.path.name + '.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(payload, f)
        os.replace(tmp_path, self.path)

    def reset(self) -> None:
        """Forget progress and remove the file."""
        self.processed = NOTHING_PROCESSED
        if self.path.exists():
            self.path.unlink()

    def __repr__(self) -> str:
        return f"ProgressStore({self.archive_path.name}, processed={self.processed})"


__all__ = ['ProgressStore', 'PROGRESS_VERSION']
