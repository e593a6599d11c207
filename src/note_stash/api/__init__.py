"""HTTP API for the Note Stash service."""
