"""
Graph fixtures and helpers shared by the test modules.
"""

import os
import shutil
import subprocess
from pathlib import Path

import pytest

# A ← B1 ← C and A ← B2 ← C; C's first parent is B1
DIAMOND = {
    "C": ["B1", "B2"],
    "B1": ["A"],
    "B2": ["A"],
    "A": [],
}

# Merge of a merge, a shared grandparent and a second root
NESTED = {
    "M2": ["M1", "X"],
    "M1": ["P", "Q"],
    "X": ["Q"],
    "P": ["R"],
    "Q": ["R", "S"],
    "R": [],
    "S": [],
}

OCTOPUS = {
    "O": ["P1", "P2", "P3"],
    "P1": ["R"],
    "P2": ["R"],
    "P3": ["R"],
    "R": [],
}

TWO_ROOTS = {
    "M": ["A", "B"],
    "A": [],
    "B": [],
}


def all_paths(graph: dict[str, list[str]], start: str) -> list[list[str]]:
    """Every maximal path from ``start`` to a root, by plain recursion.

    Reference oracle for small fixtures only.
    """
    parents = graph[start]
    if not parents:
        return [[start]]
    return [[start, *rest] for parent in parents for rest in all_paths(graph, parent)]


def read_lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8").splitlines()


def sequence_files(output_dir: Path) -> list[Path]:
    """Sequence artifacts in numeric order."""
    files = output_dir.glob("CommitSequence_*.txt")
    return sorted(files, key=lambda p: int(p.stem.rsplit("_", 1)[1]))


# ── Real git repositories ───────────────────────────────────────

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")

_GIT_ENV = {
    "GIT_AUTHOR_NAME": "Test",
    "GIT_AUTHOR_EMAIL": "test@example.com",
    "GIT_AUTHOR_DATE": "2020-01-01T00:00:00+0000",
    "GIT_COMMITTER_NAME": "Test",
    "GIT_COMMITTER_EMAIL": "test@example.com",
    "GIT_COMMITTER_DATE": "2020-01-01T00:00:00+0000",
}


def _git(repo: Path, *args: str, stdin: str | None = None) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        input=stdin,
        capture_output=True,
        text=True,
        check=True,
        env={**os.environ, **_GIT_ENV},
    )
    return result.stdout.strip()


def build_git_repo(repo: Path, graph: dict[str, list[str]], head: str) -> dict[str, str]:
    """Create a git repository whose commit graph mirrors ``graph``.

    Every commit gets the empty tree and its graph name as the message;
    parent order is preserved. HEAD points at ``head``.

    Returns:
        Mapping of graph name to commit id.
    """
    repo.mkdir(parents=True, exist_ok=True)
    _git(repo, "init", "-q")
    tree = _git(repo, "mktree", stdin="")

    ids: dict[str, str] = {}
    stack = [head]
    while stack:
        name = stack[-1]
        missing = [p for p in graph[name] if p not in ids]
        if missing:
            stack.extend(missing)
            continue
        stack.pop()
        if name in ids:
            continue
        args = ["commit-tree", tree, "-m", name]
        for parent in graph[name]:
            args += ["-p", ids[parent]]
        ids[name] = _git(repo, *args)

    _git(repo, "update-ref", "HEAD", ids[head])
    return ids
