"""
Sequence builder — walks one commit sequence from its start commit to a root.

The walk always follows the FIRST parent the VCS reports. Every other
parent of a merge commit is handed back to the sequencer as a
PendingSubSequence and walked later by its own builder; the builder
never recurses.

A builder created for a pending sub-sequence starts by replaying its
parent's artifact up to and including the merge commit (the branch
point). That reproduces the shared newest part of the path without
querying the VCS again and without holding either sequence in memory.

Flow:
    [replay parent prefix] → start commit → parents(tail) ... → root → destroy cache
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from gitseq.adapters.base import VcsAdapter
from gitseq.core.models.config import SequencerConfig
from gitseq.core.models.sequence import PendingSubSequence, SummaryRecord
from gitseq.core.persistence.commit_cache import CacheIOError, CommitCache

logger = logging.getLogger(__name__)


@dataclass
class SequenceResult:
    """Outcome of one builder run."""

    number: int
    name: str                       # artifact name without extension
    path: Path
    start_commit: str
    commit_count: int = 0           # ids actually written to the artifact
    status: str = "ok"              # ok, truncated, failed
    error: str | None = None
    inherited: bool = False         # started from a parent's prefix

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def artifact_created(self) -> bool:
        """Whether an artifact exists for this sequence (even a partial one)."""
        return self.path.is_file()

    def summary_record(self) -> SummaryRecord:
        return SummaryRecord(sequence_name=self.name, commit_count=self.commit_count)

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "name": self.name,
            "path": str(self.path),
            "start_commit": self.start_commit,
            "commit_count": self.commit_count,
            "status": self.status,
            "error": self.error,
            "inherited": self.inherited,
        }


class SequenceBuilder:
    """Builds a single commit sequence artifact.

    Args:
        vcs: Adapter answering parent queries.
        repository: Repository directory passed to every query.
        start_commit: First commit of the walk (after any inherited prefix).
        output_dir: Directory receiving the artifact.
        number: Sequence number assigned by the sequencer.
        on_branch: Callback receiving every discovered branch.
        config: Run settings (cache capacity, file naming).
        prefix: Work item whose parent artifact is replayed first.
    """

    def __init__(
        self,
        vcs: VcsAdapter,
        repository: Path,
        start_commit: str,
        output_dir: Path,
        number: int,
        on_branch: Callable[[PendingSubSequence], None],
        config: SequencerConfig | None = None,
        prefix: PendingSubSequence | None = None,
    ):
        self._vcs = vcs
        self._repository = repository
        self._start_commit = start_commit
        self._number = number
        self._on_branch = on_branch
        self._config = config or SequencerConfig()
        self._prefix = prefix
        self._output_file = output_dir / self._config.sequence_file_name(number)

        if prefix is None:
            logger.debug("Commit sequence %d: repository=%s, output=%s",
                         number, repository, self._output_file)
        else:
            logger.debug(
                "Commit sequence %d: repository=%s, output=%s, parent=%s, branch point=%s",
                number, repository, self._output_file,
                prefix.parent_artifact, prefix.branch_point,
            )

    @property
    def number(self) -> int:
        return self._number

    @property
    def start_commit(self) -> str:
        return self._start_commit

    @property
    def output_file(self) -> Path:
        return self._output_file

    @property
    def name(self) -> str:
        return self._output_file.stem

    def run(self) -> SequenceResult:
        """Walk the sequence and write its artifact."""
        result = SequenceResult(
            number=self._number,
            name=self.name,
            path=self._output_file,
            start_commit=self._start_commit,
            inherited=self._prefix is not None,
        )
        logger.debug("Start sequence creation: %s from %s", result.name, self._start_commit)

        try:
            cache = CommitCache(self._output_file, self._config.cache_capacity)
        except CacheIOError as e:
            logger.error("Creating commit sequence %s failed: %s", result.name, e)
            result.status = "failed"
            result.error = str(e)
            return result

        try:
            if self._prefix is not None and not self._replay_prefix(cache, self._prefix, result):
                result.status = "failed"
            else:
                self._walk(cache, result)
        finally:
            if not cache.destroy():
                logger.error("Destroying the commit cache for %s failed", result.name)
                result.status = "failed"
                result.error = result.error or f"Writing {self._output_file.name} failed"
            result.commit_count = cache.written_commits

        return result

    # ── Walk ────────────────────────────────────────────────────

    def _replay_prefix(
        self,
        cache: CommitCache,
        prefix: PendingSubSequence,
        result: SequenceResult,
    ) -> bool:
        """Copy the parent's artifact up to and including the branch point."""
        try:
            with prefix.parent_artifact.open("r", encoding="utf-8") as f:
                for line in f:
                    commit = line.rstrip("\n")
                    cache.add(commit)
                    if commit == prefix.branch_point:
                        return True
        except OSError as e:
            logger.error("Reading content from %s failed: %s", prefix.parent_artifact, e)
            result.error = f"Reading {prefix.parent_artifact.name} failed: {e}"
            return False

        logger.error(
            "Branch point %s not found in %s",
            prefix.branch_point,
            prefix.parent_artifact.name,
        )
        result.error = f"Branch point {prefix.branch_point} not found in {prefix.parent_artifact.name}"
        return False

    def _walk(self, cache: CommitCache, result: SequenceResult) -> None:
        """Follow first parents from the start commit until a root."""
        cache.add(self._start_commit)
        tail = self._start_commit

        while True:
            query = self._vcs.parents(self._repository, tail)
            if query.failed:
                logger.error("Retrieving parent commits for %s failed: %s", tail, query.error)
                result.status = "truncated"
                result.error = f"Parent query for {tail} failed: {query.error}"
                return

            parents = query.output
            if not parents:
                return

            for branch_commit in parents[1:]:
                self._on_branch(
                    PendingSubSequence(
                        branch_commit=branch_commit,
                        parent_artifact=self._output_file,
                        branch_point=tail,
                    )
                )

            tail = parents[0]
            cache.add(tail)
