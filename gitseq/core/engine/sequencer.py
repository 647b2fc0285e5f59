"""
Sequencer — the central scheduling loop.

The sequencer owns everything shared by a run: the FIFO work list of
pending sub-sequences, the sequence-number counter and the summary
file. It seeds one builder for the start commit, then drains the work
list, running one builder at a time until no branch is left.

Flow:
    initialize (start commit must exist) → run initial builder →
    pop work item → run builder → append summary line → ... → close summary

The work list replaces recursion into branches. Call-stack depth stays
constant no matter how long the history is or how many merges it has.

Concurrency:
    Builders run strictly one after another, so nothing here is locked.
    Running builders in parallel would require:
        - a work list with mutually exclusive append/pop (queue.Queue),
        - serialized summary appends (one writer, or a lock around append),
        - a lock-guarded sequence counter,
        - each builder keeping exclusive ownership of its own artifact.
    A child builder must also not start before its parent's artifact is
    closed, since it replays that file.
"""

from __future__ import annotations

import itertools
import logging
import time
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path

from gitseq.adapters.base import VcsAdapter
from gitseq.core.engine.builder import SequenceBuilder, SequenceResult
from gitseq.core.models.config import SequencerConfig
from gitseq.core.models.sequence import PendingSubSequence
from gitseq.core.persistence.summary import SummaryWriter

logger = logging.getLogger(__name__)


class StartCommitError(Exception):
    """Raised when the start commit is not available in the repository."""


@dataclass
class RunReport:
    """Result of a complete sequencing run."""

    repository: str = ""
    start_commit: str = ""
    output_dir: str = ""
    summary_path: str = ""
    sequences: list[SequenceResult] = field(default_factory=list)
    summary_failures: int = 0
    duration_ms: int = 0

    @property
    def total(self) -> int:
        return len(self.sequences)

    @property
    def total_commits(self) -> int:
        return sum(s.commit_count for s in self.sequences)

    @property
    def failed(self) -> int:
        return sum(1 for s in self.sequences if s.status == "failed")

    @property
    def truncated(self) -> int:
        return sum(1 for s in self.sequences if s.status == "truncated")

    @property
    def shortest(self) -> SequenceResult | None:
        return min(self.sequences, key=lambda s: s.commit_count, default=None)

    @property
    def longest(self) -> SequenceResult | None:
        return max(self.sequences, key=lambda s: s.commit_count, default=None)

    @property
    def status(self) -> str:
        bad = self.failed + self.truncated
        if bad == 0 and self.summary_failures == 0:
            return "ok"
        if bad < self.total:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        shortest, longest = self.shortest, self.longest
        return {
            "repository": self.repository,
            "start_commit": self.start_commit,
            "output_dir": self.output_dir,
            "summary": self.summary_path,
            "status": self.status,
            "total": self.total,
            "total_commits": self.total_commits,
            "failed": self.failed,
            "truncated": self.truncated,
            "summary_failures": self.summary_failures,
            "shortest": shortest.name if shortest else None,
            "longest": longest.name if longest else None,
            "duration_ms": self.duration_ms,
            "sequences": [s.to_dict() for s in self.sequences],
        }


class Sequencer:
    """Enumerates every commit sequence reachable from a start commit.

    Constructing a Sequencer validates the start commit; nothing is
    written until ``run()``.

    Raises:
        StartCommitError: If ``start_commit`` does not exist in ``repository``.
    """

    def __init__(
        self,
        vcs: VcsAdapter,
        repository: Path,
        start_commit: str,
        output_dir: Path,
        config: SequencerConfig | None = None,
    ):
        self._vcs = vcs
        self._repository = repository
        self._output_dir = output_dir
        self._config = config or SequencerConfig()
        self._work_list: deque[PendingSubSequence] = deque()
        self._counter = itertools.count(1)
        self._created = 0
        self._ran = False

        if not vcs.exists(repository, start_commit):
            raise StartCommitError(
                f'The commit "{start_commit}" is not available in "{repository}"'
            )
        self._start_commit = start_commit

    @property
    def start_commit(self) -> str:
        return self._start_commit

    @property
    def summary_path(self) -> Path:
        return self._output_dir / self._config.summary_file

    @property
    def pending(self) -> int:
        """Number of discovered branches not yet walked."""
        return len(self._work_list)

    @property
    def sequences_created(self) -> int:
        return self._created

    def add(self, pending: PendingSubSequence) -> None:
        """Register a discovered branch for later execution."""
        self._work_list.append(pending)
        logger.debug(
            "Branch %s registered at %s (pending: %d)",
            pending.branch_commit,
            pending.branch_point,
            len(self._work_list),
        )

    def run(self) -> RunReport:
        """Create all commit sequences and the summary.

        Returns:
            RunReport with one SequenceResult per created sequence.
        """
        if self._ran:
            raise RuntimeError("Sequencer.run() may only be called once")
        self._ran = True

        logger.info(
            "Start: repository=%s, start commit=%s, output=%s",
            self._repository,
            self._start_commit,
            self._output_dir,
        )
        started = time.monotonic()
        report = RunReport(
            repository=str(self._repository),
            start_commit=self._start_commit,
            output_dir=str(self._output_dir),
            summary_path=str(self.summary_path),
        )

        summary = SummaryWriter(self.summary_path)
        try:
            self._execute(self._create_builder(self._start_commit), summary, report)
            while self._work_list:
                pending = self._work_list.popleft()
                builder = self._create_builder(pending.branch_commit, prefix=pending)
                self._execute(builder, summary, report)
        finally:
            summary.close()

        report.duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            "Finished: %d commit sequences created in %.1fs (status=%s)",
            report.total,
            report.duration_ms / 1000,
            report.status,
        )
        return report

    # ── Helpers ─────────────────────────────────────────────────

    def _create_builder(
        self,
        start_commit: str,
        prefix: PendingSubSequence | None = None,
    ) -> SequenceBuilder:
        self._created = next(self._counter)
        return SequenceBuilder(
            vcs=self._vcs,
            repository=self._repository,
            start_commit=start_commit,
            output_dir=self._output_dir,
            number=self._created,
            on_branch=self.add,
            config=self._config,
            prefix=prefix,
        )

    def _execute(
        self,
        builder: SequenceBuilder,
        summary: SummaryWriter,
        report: RunReport,
    ) -> None:
        """Run one builder and record its completion."""
        result = builder.run()
        report.sequences.append(result)

        if result.artifact_created and not summary.append(result.summary_record()):
            report.summary_failures += 1

        status_marker = "✓" if result.ok else "✗"
        logger.debug(
            "%s %s: %d commits (%s)",
            status_marker,
            result.name,
            result.commit_count,
            result.status,
        )
