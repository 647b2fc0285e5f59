"""gitseq — enumerate every commit sequence (root-ward path) of a git history."""

__version__ = "0.1.0"
