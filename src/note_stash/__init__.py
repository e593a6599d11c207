"""Note Stash: personal notes behind token-based authentication."""

__version__ = "0.1.0"
