"""
QueryResult model — the VCS query contract.

Every question the engine asks the version-control tool (does this
commit exist, what are its parents, where is HEAD) comes back as a
QueryResult. Adapters never raise for a failed query: a non-zero exit
status, a timeout or an OS error is captured here with status='failed'.

A failed query is NOT the same as an empty answer. A root commit has
an ``ok`` result with no parents; a broken ``git`` call has a ``failed``
result and the caller decides how to degrade.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class QueryResult(BaseModel):
    """Outcome of a single VCS query."""

    operation: str                  # exists, parents, head
    commit: str = ""                # the commit the query was about ("" for head)
    status: Literal["ok", "failed"] = "ok"

    output: list[str] = Field(default_factory=list)
    error: str | None = None
    duration_ms: int = 0

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the query succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the query failed."""
        return self.status == "failed"

    @property
    def first(self) -> str | None:
        """First output entry, or None for an empty answer."""
        return self.output[0] if self.output else None

    @classmethod
    def success(
        cls,
        operation: str,
        commit: str = "",
        output: list[str] | None = None,
        **kwargs: Any,
    ) -> QueryResult:
        """Create a success result."""
        return cls(
            operation=operation,
            commit=commit,
            status="ok",
            output=output or [],
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        operation: str,
        error: str,
        commit: str = "",
        **kwargs: Any,
    ) -> QueryResult:
        """Create a failure result."""
        return cls(
            operation=operation,
            commit=commit,
            status="failed",
            error=error,
            **kwargs,
        )
