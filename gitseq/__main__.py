"""Allow ``python -m gitseq``."""

from gitseq.main import cli

cli()
