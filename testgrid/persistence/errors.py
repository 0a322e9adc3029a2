"""Persistence exceptions."""


class PersistenceError(Exception):
    """Raised when a test plan or scenario cannot be read or written."""

    pass
