"""
Utility functions for the database backup tool.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from .models import ALL_TABLES, DumpRequest, StorageSettings

TIMESTAMP_FORMAT = '%Y%m%d_%H%M%S'


def setup_logging(log_settings: dict[str, Any], console: bool = True) -> None:
    """Setup logging configuration.

    ``console=False`` leaves stdout to the progress reporter and only
    attaches the file handler (if a file is configured).
    """
    log_level = getattr(logging, str(log_settings.get('level', 'INFO')).upper())
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler(sys.stdout))

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )


def quote_identifier(name: str) -> str:
    """Backtick-quote a MySQL identifier."""
    return "`" + name.replace("`", "``") + "`"


def backup_filename(database: str, now: Optional[datetime] = None) -> str:
    """Dump file name: ``db-backup-<database>-<YYYYMMDD_HHMMSS>.sql``."""
    now = now or datetime.now()
    return f"db-backup-{database}-{now.strftime(TIMESTAMP_FORMAT)}.sql"


def print_dry_run_info(request: DumpRequest, storage: Optional[StorageSettings]) -> None:
    """Print information about what would be dumped in dry-run mode."""
    logging.info(
        f"Would dump database: {request.database} from "
        f"{request.user}@{request.host}:{request.port} (charset {request.charset})"
    )
    if request.tables == ALL_TABLES:
        logging.info("  - All tables")
    else:
        for table in request.resolve_tables():
            logging.info(f"  - {table}")
    if request.ignore_tables:
        logging.info(f"  Ignored: {', '.join(sorted(request.ignore_tables))}")

    logging.info(f"  {', '.join(format_request_display(request))}")
    if storage is not None:
        logging.info(f"  Upload to bucket: {storage.bucket}")
    else:
        logging.info("  Upload disabled")


def format_request_display(request: DumpRequest) -> list[str]:
    """Format dump options for display in dry-run mode."""
    parts = [
        f"directory={request.output_dir}",
        f"batch_size={request.batch_size}",
    ]
    if request.compress:
        parts.append("gzip")
    if request.disable_foreign_key_checks:
        parts.append("foreign_key_checks=off")
    return parts
