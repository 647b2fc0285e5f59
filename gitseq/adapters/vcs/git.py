"""
Git adapter — commit graph queries.

Answers existence, parent and HEAD queries through git plumbing
commands. Uses the git CLI — never parses the object store itself.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path

from gitseq.adapters.base import VcsAdapter
from gitseq.core.models.query import QueryResult

logger = logging.getLogger(__name__)


class GitAdapter(VcsAdapter):
    """Commit graph queries against a local git repository.

    Commands:
        exists:  git cat-file -e <commit>^{commit}
        parents: git rev-list --parents -n 1 <commit>
        head:    git rev-parse --verify HEAD
    """

    def __init__(self, binary: str = "git", timeout: int = 30):
        self._binary = binary
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "git"

    @property
    def timeout(self) -> int:
        return self._timeout

    def is_available(self) -> bool:
        return shutil.which(self._binary) is not None

    def exists(self, repository: Path, commit: str) -> bool:
        if not commit or not commit.strip():
            return False
        result = self._query(
            "exists", ["cat-file", "-e", f"{commit}^{{commit}}"], repository, commit
        )
        if result.failed:
            logger.debug("Commit %s not available in %s: %s", commit, repository, result.error)
        return result.ok

    def parents(self, repository: Path, commit: str) -> QueryResult:
        result = self._query(
            "parents", ["rev-list", "--parents", "-n", "1", commit], repository, commit
        )
        if result.failed:
            return result
        # Output: "<commit> <parent1> <parent2> ...", first token is the commit itself
        parents = result.output[1:]
        return QueryResult.success(
            operation="parents",
            commit=commit,
            output=parents,
            duration_ms=result.duration_ms,
        )

    def head(self, repository: Path) -> QueryResult:
        return self._query("head", ["rev-parse", "--verify", "HEAD"], repository)

    # ── Helpers ─────────────────────────────────────────────────

    def _query(
        self,
        operation: str,
        args: list[str],
        repository: Path,
        commit: str = "",
    ) -> QueryResult:
        """Run one git command and capture its outcome as a QueryResult."""
        command = [self._binary, *args]
        logger.debug("Executing: %s (cwd=%s)", " ".join(command), repository)
        start = time.monotonic()
        try:
            result = subprocess.run(
                command,
                cwd=str(repository),
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            return QueryResult.failure(
                operation=operation,
                commit=commit,
                error=f"git {args[0]} timed out after {self._timeout}s",
                metadata={"command": command},
            )
        except OSError as e:
            return QueryResult.failure(
                operation=operation,
                commit=commit,
                error=f"Cannot execute {self._binary}: {e}",
                metadata={"command": command},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        if result.returncode != 0:
            return QueryResult.failure(
                operation=operation,
                commit=commit,
                error=result.stderr.strip() or f"git {args[0]} exited with code {result.returncode}",
                duration_ms=elapsed_ms,
                metadata={"command": command, "return_code": result.returncode},
            )

        return QueryResult.success(
            operation=operation,
            commit=commit,
            output=result.stdout.split(),
            duration_ms=elapsed_ms,
        )
