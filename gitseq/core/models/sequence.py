"""
Sequence models — work items and summary records.

A PendingSubSequence is a branch discovered at a merge commit that has
not been walked yet. It remembers which artifact it shares its newest
commits with, and where that shared part ends, so the branch can be
materialized later by replaying the parent's file instead of asking
the VCS again.

A SummaryRecord is the single line written to the run summary when a
sequence is complete.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

SUMMARY_SEPARATOR = ","


class PendingSubSequence(BaseModel):
    """A deferred sequence registered with the sequencer."""

    branch_commit: str              # the non-first parent to continue from
    parent_artifact: Path           # artifact of the sequence that found the branch
    branch_point: str               # the merge commit; last line copied from the parent


class SummaryRecord(BaseModel):
    """One summary line: sequence artifact name and its commit count."""

    sequence_name: str
    commit_count: int = Field(default=0, ge=0)

    def to_line(self) -> str:
        """Serialize to ``<name>,<count>`` (no line terminator)."""
        return f"{self.sequence_name}{SUMMARY_SEPARATOR}{self.commit_count}"

    @classmethod
    def from_line(cls, line: str) -> SummaryRecord:
        """Parse a ``<name>,<count>`` line.

        The name is split off at the last separator, so names that
        contain a comma still parse.

        Raises:
            ValueError: If the line has no separator or a non-integer count.
        """
        name, sep, count = line.strip().rpartition(SUMMARY_SEPARATOR)
        if not sep or not name:
            raise ValueError(f"Malformed summary line: {line!r}")
        return cls(sequence_name=name, commit_count=int(count))
