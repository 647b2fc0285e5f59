"""
Adapter base — the query contract between engine and version-control tool.

The engine only asks three questions of a repository: does a commit
exist, what are a commit's parents, and which commit is HEAD. Every
adapter answers them through this protocol; the engine never shells out
directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from gitseq.core.models.query import QueryResult


class VcsAdapter(ABC):
    """Abstract base class for VCS query adapters.

    Adapters answer queries and return QueryResults.
    They NEVER raise exceptions — failures are captured in the result.

    To create a new adapter:
        1. Subclass VcsAdapter
        2. Implement name, is_available, exists, parents, head
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'git', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying tool is installed.

        Should be fast and never raise.
        """

    @abstractmethod
    def exists(self, repository: Path, commit: str) -> bool:
        """Whether ``commit`` names a commit in ``repository``.

        A failed lookup counts as "not available". Blank ids never exist.
        """

    @abstractmethod
    def parents(self, repository: Path, commit: str) -> QueryResult:
        """Parents of ``commit``, in the order the tool reports them.

        Returns:
            An ok result whose ``output`` is the ordered parent list
            (empty for a root commit), or a failed result.
        """

    @abstractmethod
    def head(self, repository: Path) -> QueryResult:
        """The commit HEAD currently points to (``output[0]`` when ok)."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
