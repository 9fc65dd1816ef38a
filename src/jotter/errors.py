"""
Error taxonomy for Jotter.

StorageUnavailable is fatal for the session. WriteFailed and ReadFailed are
per-operation and leave durable state untouched. Blank input is
rejected by the session before it reaches storage.
"""


class JotterError(Exception):
    """Base class for all Jotter errors."""


class StorageUnavailable(JotterError):
    """The notes database could not be opened."""


class WriteFailed(JotterError):
    """A note could not be written. No record was created."""


class ReadFailed(JotterError):
    """The notes collection could not be read."""


class StorageNotReady(RuntimeError):
    """A store operation was issued before the connection reached READY."""
