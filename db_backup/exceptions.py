"""
Exception hierarchy for the database backup tool.

Every failure raised inside a backup run derives from ``BackupError`` so the
orchestrator can catch a single type at the top of the run and turn it into
a ``DumpResult``.
"""


class BackupError(Exception):
    """Base class for all backup failures."""


class ConfigurationError(BackupError):
    """Invalid or missing configuration (raised before touching the database)."""


class DatabaseConnectionError(BackupError):
    """The database server could not be reached or refused the login."""


class QueryError(BackupError):
    """A schema or data query failed while the dump was in progress."""


class PersistenceError(BackupError):
    """Writing the dump file to local disk failed."""


class CompressionError(BackupError):
    """Gzipping the finished dump failed. The original file is kept."""


class UploadError(BackupError):
    """Uploading the artifact to object storage failed."""
