"""
Summary writer — append-only CSV of completed sequences.

One line per sequence, ``<artifact-name>,<commit-count>``, written as
soon as the sequence completes. The file is opened once per run and
flushed after every line, so nothing accumulates in memory no matter
how many sequences a repository produces.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

from gitseq.core.models.sequence import SummaryRecord

logger = logging.getLogger(__name__)


class SummaryWriter:
    """Single-owner writer for the run summary.

    Failures to open or append are logged and reported as False; they
    never abort the run.
    """

    def __init__(self, path: Path):
        self._path = path
        self._records = 0
        self._handle: TextIO | None = None
        try:
            self._handle = path.open("w", encoding="utf-8", newline="\n")
        except OSError as e:
            logger.error("Opening summary file %s failed: %s", path, e)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def records_written(self) -> int:
        return self._records

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def append(self, record: SummaryRecord) -> bool:
        """Append one record and flush it to disk."""
        if self._handle is None:
            logger.error("Summary entry for %s not written: %s is not open",
                         record.sequence_name, self._path.name)
            return False
        try:
            self._handle.write(record.to_line() + "\n")
            self._handle.flush()
        except OSError as e:
            logger.error("Writing summary entry for %s failed: %s", record.sequence_name, e)
            return False
        self._records += 1
        logger.debug("Summary entry written: %s", record.to_line())
        return True

    def close(self) -> None:
        """Close the summary file. Safe to call more than once."""
        if self._handle is None:
            return
        try:
            self._handle.close()
        except OSError as e:
            logger.error("Closing summary file %s failed: %s", self._path, e)
        self._handle = None


def read_summary(path: Path) -> list[SummaryRecord]:
    """Read all records from a summary file.

    Returns:
        Records in file order. Missing file → empty list.
    """
    if not path.is_file():
        return []

    records = []
    with path.open("r", encoding="utf-8") as f:
        for line_num, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                records.append(SummaryRecord.from_line(line))
            except ValueError as e:
                logger.warning("Skipping corrupt summary entry at line %d: %s", line_num, e)
    return records
