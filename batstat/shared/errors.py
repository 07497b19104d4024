"""Base exception for batstat services."""


class BatstatError(Exception):
    """Base class for every fatal batstat condition."""

    pass
