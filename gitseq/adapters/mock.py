"""
Mock adapter — in-memory commit graph for tests.

Answers queries from a plain ``{commit: [parents...]}`` mapping without
touching git. Individual commits can be configured to fail their
parent query, which is how tests exercise truncated walks.
"""

from __future__ import annotations

from pathlib import Path

from gitseq.adapters.base import VcsAdapter
from gitseq.core.models.query import QueryResult


class MockVcsAdapter(VcsAdapter):
    """In-memory VCS adapter.

    Parent lists are returned in the order given, so the mapping also
    fixes the first-parent tie-break.
    """

    def __init__(
        self,
        graph: dict[str, list[str]] | None = None,
        head: str | None = None,
        available: bool = True,
        adapter_name: str = "mock",
    ):
        self._graph: dict[str, list[str]] = {k: list(v) for k, v in (graph or {}).items()}
        self._head = head
        self._available = available
        self._name = adapter_name
        self._failures: dict[str, str] = {}
        self._call_log: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[tuple[str, str]]:
        """All (operation, commit) pairs this mock has answered."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def is_available(self) -> bool:
        return self._available

    def add_commit(self, commit: str, parents: list[str] | None = None) -> None:
        """Add (or replace) a commit and its ordered parents."""
        self._graph[commit] = list(parents or [])

    def set_head(self, commit: str | None) -> None:
        self._head = commit

    def set_failure(self, commit: str, error: str = "Mock failure") -> None:
        """Make the parent query for ``commit`` fail."""
        self._failures[commit] = error

    def exists(self, repository: Path, commit: str) -> bool:
        self._call_log.append(("exists", commit))
        return bool(commit and commit.strip()) and commit in self._graph

    def parents(self, repository: Path, commit: str) -> QueryResult:
        self._call_log.append(("parents", commit))
        if commit in self._failures:
            return QueryResult.failure("parents", self._failures[commit], commit=commit)
        if commit not in self._graph:
            return QueryResult.failure("parents", f"unknown commit {commit}", commit=commit)
        return QueryResult.success("parents", commit=commit, output=list(self._graph[commit]))

    def head(self, repository: Path) -> QueryResult:
        self._call_log.append(("head", ""))
        if self._head is None:
            return QueryResult.failure("head", "HEAD is not set")
        return QueryResult.success("head", output=[self._head])

    def reset(self) -> None:
        """Clear call log and configured failures."""
        self._call_log.clear()
        self._failures.clear()
