"""
SequencerConfig — tunables for a sequencing run.

Loaded from gitseq.yml by ``gitseq.core.config.loader``. Every field has
a default, so an empty (or absent) config file is valid.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CACHE_CAPACITY = 1000


class SequencerConfig(BaseModel):
    """Settings shared by the sequencer, its builders and the git adapter."""

    model_config = ConfigDict(extra="forbid")

    cache_capacity: int = Field(default=DEFAULT_CACHE_CAPACITY, ge=1)

    sequence_file_prefix: str = "CommitSequence_"
    sequence_file_suffix: str = ".txt"
    summary_file: str = "sequences_summary.csv"

    git_binary: str = "git"
    git_timeout: int = Field(default=30, ge=1)      # seconds, per git call

    @field_validator("sequence_file_prefix", "summary_file", "git_binary")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("sequence_file_prefix", "sequence_file_suffix", "summary_file")
    @classmethod
    def _plain_file_name(cls, v: str) -> str:
        if "/" in v or "\\" in v:
            raise ValueError(f"must be a plain file name, got {v!r}")
        return v

    def sequence_file_name(self, number: int) -> str:
        """Artifact file name for sequence ``number``."""
        return f"{self.sequence_file_prefix}{number}{self.sequence_file_suffix}"
