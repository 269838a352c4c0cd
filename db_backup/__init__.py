"""
Database Backup
===============
Logical backup of a MySQL database with support for:
- All tables or an explicit table list, with an ignore list
- Batched multi-row INSERT statements under bounded memory
- Foreign key check toggling
- Gzip compression
- Upload to S3
"""

from .artifact import DumpArtifact
from .config import ConfigLoader
from .connection import DatabaseConnection
from .database_dumper import DatabaseDumper
from .encoder import encode_value
from .exceptions import (
    BackupError,
    CompressionError,
    ConfigurationError,
    DatabaseConnectionError,
    PersistenceError,
    QueryError,
    UploadError,
)
from .main import main
from .models import (
    ALL_TABLES,
    DumpRequest,
    DumpResult,
    RowWindow,
    StorageSettings,
    TableSchema,
    TableStats,
    UploadResult,
)
from .pipeline import ArtifactPipeline
from .progress import ProgressReporter
from .row_batcher import RowBatcher
from .storage import S3Storage
from .table_dumper import TableDumper
from .utils import backup_filename, print_dry_run_info, setup_logging

__version__ = "1.0.0"

__all__ = [
    # Main entry point
    "main",
    # Core classes
    "ArtifactPipeline",
    "ConfigLoader",
    "DatabaseConnection",
    "DatabaseDumper",
    "DumpArtifact",
    "ProgressReporter",
    "RowBatcher",
    "S3Storage",
    "TableDumper",
    # Models
    "ALL_TABLES",
    "DumpRequest",
    "DumpResult",
    "RowWindow",
    "StorageSettings",
    "TableSchema",
    "TableStats",
    "UploadResult",
    # Exceptions
    "BackupError",
    "CompressionError",
    "ConfigurationError",
    "DatabaseConnectionError",
    "PersistenceError",
    "QueryError",
    "UploadError",
    # Utilities
    "backup_filename",
    "encode_value",
    "print_dry_run_info",
    "setup_logging",
]
