"""Adapters — version-control query bindings.

Public re-exports for convenient access.
"""

from gitseq.adapters.base import VcsAdapter
from gitseq.adapters.mock import MockVcsAdapter
from gitseq.adapters.vcs.git import GitAdapter

__all__ = [
    "GitAdapter",
    "MockVcsAdapter",
    "VcsAdapter",
]
