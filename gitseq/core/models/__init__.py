"""
Domain models — Pydantic types for the sequencer.

All models are re-exported here for convenient access:

    from gitseq.core.models import PendingSubSequence, QueryResult, SequencerConfig
"""

from gitseq.core.models.config import DEFAULT_CACHE_CAPACITY, SequencerConfig
from gitseq.core.models.query import QueryResult
from gitseq.core.models.sequence import PendingSubSequence, SummaryRecord

__all__ = [
    "DEFAULT_CACHE_CAPACITY",
    "PendingSubSequence",
    "QueryResult",
    "SequencerConfig",
    "SummaryRecord",
]
