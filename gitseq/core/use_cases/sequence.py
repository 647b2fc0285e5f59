"""
Sequence use case — validate the run, then generate all commit sequences.

This is the top-level orchestrator behind ``gitseq run``: it checks the
repository and output directories, resolves the start commit (HEAD by
default), builds a Sequencer and runs it. Every boundary failure is
turned into ``SequenceRunResult.error`` so callers never see an
exception for bad input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from gitseq.adapters.base import VcsAdapter
from gitseq.adapters.vcs.git import GitAdapter
from gitseq.core.config.loader import ConfigError, load_config
from gitseq.core.engine.sequencer import RunReport, Sequencer, StartCommitError
from gitseq.core.models.config import SequencerConfig

logger = logging.getLogger(__name__)


class ArgumentError(Exception):
    """Raised when the run arguments are rejected before any traversal."""


@dataclass
class SequenceRunResult:
    """Result of a sequencing run, including boundary failures."""

    report: RunReport | None = None
    repository: Path | None = None
    output_dir: Path | None = None
    start_commit: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.report is not None and self.report.status == "ok"

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        if self.report:
            result.update(self.report.to_dict())
        return result


def validate_arguments(repository: Path, output_dir: Path) -> None:
    """Reject unusable directories before anything is written.

    Raises:
        ArgumentError: If the repository is not an existing directory, or the
            output directory is missing, not a directory, or not empty.
    """
    if not repository.exists():
        raise ArgumentError(f'The repository directory "{repository}" does not exist')
    if not repository.is_dir():
        raise ArgumentError(f'The repository directory "{repository}" is not a directory')

    if not output_dir.exists():
        raise ArgumentError(f'The output directory "{output_dir}" does not exist')
    if not output_dir.is_dir():
        raise ArgumentError(f'The output directory "{output_dir}" is not a directory')
    if any(output_dir.iterdir()):
        raise ArgumentError(f'The output directory "{output_dir}" is not empty')


def resolve_start_commit(vcs: VcsAdapter, repository: Path, start_commit: str | None) -> str:
    """Return the explicit start commit, or the repository's HEAD.

    Raises:
        ArgumentError: If no start commit is given and HEAD cannot be resolved.
    """
    if start_commit:
        return start_commit

    result = vcs.head(repository)
    if result.failed or not result.first:
        raise ArgumentError(f"Retrieving HEAD commit failed: {result.error or 'empty output'}")
    return result.first


def run_sequencing(
    repository: Path,
    output_dir: Path,
    start_commit: str | None = None,
    config_path: Path | None = None,
    config: SequencerConfig | None = None,
    vcs: VcsAdapter | None = None,
) -> SequenceRunResult:
    """Generate every commit sequence reachable from the start commit.

    Args:
        repository: Repository working directory.
        output_dir: Existing, empty directory for the artifacts.
        start_commit: Commit to start from (default: HEAD).
        config_path: Optional explicit path to gitseq.yml.
        config: Pre-built configuration; skips file loading when given.
        vcs: Optional adapter (default: GitAdapter built from the config).

    Returns:
        SequenceRunResult with the run report, or an error message.
    """
    result = SequenceRunResult(repository=repository, output_dir=output_dir)

    # ── Load config ─────────────────────────────────────────────
    if config is None:
        try:
            config = load_config(config_path)
        except ConfigError as e:
            result.error = str(e)
            return result

    if vcs is None:
        vcs = GitAdapter(binary=config.git_binary, timeout=config.git_timeout)

    # ── Validate boundary ───────────────────────────────────────
    try:
        validate_arguments(repository, output_dir)
        if not vcs.is_available():
            raise ArgumentError(f"The '{vcs.name}' tool is not available on this system")
        result.start_commit = resolve_start_commit(vcs, repository, start_commit)
    except ArgumentError as e:
        logger.error("Execution failed: %s", e)
        result.error = str(e)
        return result

    # ── Run ─────────────────────────────────────────────────────
    try:
        sequencer = Sequencer(vcs, repository, result.start_commit, output_dir, config)
    except StartCommitError as e:
        logger.error("Creating commit sequences failed: %s", e)
        result.error = str(e)
        return result

    result.report = sequencer.run()
    return result
