"""Exceptions raised by the storage layer."""


class StorageError(Exception):
    """
    A database operation could not be completed.

    Wraps driver, socket and timeout failures so callers above the storage
    layer handle a single type. The original exception is chained as
    ``__cause__``.
    """
