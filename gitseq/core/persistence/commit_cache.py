"""
Commit cache — bounded write buffer for one sequence artifact.

A sequence can be hundreds of thousands of commits long, and a run can
produce many sequences. The cache keeps at most ``capacity`` commit ids
in memory; when it is full the buffered ids are appended to the
artifact and the buffer starts over. Peak memory is O(capacity)
regardless of sequence length.

Lifecycle:
    cache = CommitCache(path)      # opens (truncates) the artifact
    cache.add(commit) ...          # buffered, flushed when full
    cache.destroy()                # final flush + close, exactly once
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

from gitseq.core.models.config import DEFAULT_CACHE_CAPACITY

logger = logging.getLogger(__name__)


class CacheIOError(Exception):
    """Raised when the artifact behind a CommitCache cannot be opened."""


class CommitCache:
    """Fixed-capacity commit id buffer bound to one output file.

    Write failures never raise: ``add`` and ``destroy`` log them and
    return False, and ``written_commits`` only counts ids that actually
    reached the file.
    """

    def __init__(self, path: Path, capacity: int = DEFAULT_CACHE_CAPACITY):
        if capacity < 1:
            raise ValueError(f"Cache capacity must be at least 1, got {capacity}")
        self._path = path
        self._capacity = capacity
        self._buffer: list[str] = []
        self._total = 0
        self._written = 0
        try:
            self._handle: TextIO | None = path.open("w", encoding="utf-8", newline="\n")
        except OSError as e:
            raise CacheIOError(f"Opening output file {path} failed: {e}") from e
        logger.debug("Commit cache opened: %s (capacity=%d)", path, capacity)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def buffered(self) -> int:
        """Number of ids waiting in memory."""
        return len(self._buffer)

    @property
    def total_commits(self) -> int:
        """Number of ids accepted by ``add``."""
        return self._total

    @property
    def written_commits(self) -> int:
        """Number of ids written to the artifact so far."""
        return self._written

    @property
    def closed(self) -> bool:
        return self._handle is None

    def add(self, commit: str | None) -> bool:
        """Buffer a commit id, flushing first if the buffer is full.

        Returns:
            True if the id was accepted. False for a blank id, a
            destroyed cache, or a failed flush.
        """
        if commit is None or not commit.strip():
            logger.warning(
                "Addition of commit to %s denied: the commit is None, empty, or blank",
                self._path.name,
            )
            return False

        if self._handle is None:
            logger.warning("Addition of commit %s denied: cache for %s is destroyed",
                           commit, self._path.name)
            return False

        if len(self._buffer) >= self._capacity and not self._flush():
            return False

        self._buffer.append(commit)
        self._total += 1
        return True

    def destroy(self) -> bool:
        """Flush the remaining ids and release the artifact handle.

        Returns:
            True if every buffered id was written and the file closed.
        """
        if self._handle is None:
            logger.warning("Commit cache for %s already destroyed", self._path.name)
            return False

        flushed = self._flush()
        closed = True
        try:
            self._handle.close()
        except OSError as e:
            logger.error("Closing output file %s failed: %s", self._path, e)
            closed = False
        self._handle = None
        self._buffer = []
        logger.debug("Commit cache closed: %s (%d commits written)", self._path.name, self._written)
        return flushed and closed

    def _flush(self) -> bool:
        """Append the buffered ids to the artifact and clear the buffer."""
        if not self._buffer:
            return True
        assert self._handle is not None
        try:
            self._handle.write("\n".join(self._buffer) + "\n")
            self._handle.flush()
        except OSError as e:
            logger.error("Writing %d commits to %s failed: %s", len(self._buffer), self._path, e)
            return False
        self._written += len(self._buffer)
        self._buffer.clear()
        return True
