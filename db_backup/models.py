"""
Data models for the database backup tool.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from .exceptions import ConfigurationError

ALL_TABLES = "*"


@dataclass(frozen=True)
class DumpRequest:
    """Everything needed for one dump run. Immutable once built."""
    host: str
    user: str
    password: str
    database: str
    port: int = 3306
    output_dir: Path = Path("./backups")
    tables: Union[str, tuple[str, ...]] = ALL_TABLES
    ignore_tables: frozenset[str] = frozenset()
    charset: str = "utf8"
    compress: bool = True
    disable_foreign_key_checks: bool = True
    batch_size: int = 1000

    def validate(self) -> None:
        """Raise ConfigurationError for settings that can never produce a dump."""
        for key in ("host", "user", "database"):
            if not getattr(self, key):
                raise ConfigurationError(f"Database setting '{key}' must not be empty")
        # bool is an int subclass; reject it explicitly
        if isinstance(self.batch_size, bool) or not isinstance(self.batch_size, int) or self.batch_size <= 0:
            raise ConfigurationError(
                f"batch_size must be a positive integer, got {self.batch_size!r}"
            )
        if not self.tables:
            raise ConfigurationError("No tables selected for dumping")

    def resolve_tables(self, available: Optional[list[str]] = None) -> list[str]:
        """
        Resolve the table selector into an ordered list of names.

        ``available`` is the live table list and is only consulted for the
        ``*`` selector. A comma separated string is split and trimmed.
        """
        if self.tables == ALL_TABLES:
            return list(available or [])
        if isinstance(self.tables, str):
            return [name.strip() for name in self.tables.split(",") if name.strip()]
        return list(self.tables)


@dataclass(frozen=True)
class StorageSettings:
    """Object storage destination and credentials."""
    bucket: str
    region: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    key_prefix: Optional[str] = None

    def validate(self) -> None:
        if not self.bucket:
            raise ConfigurationError("Storage bucket must be configured")
        if bool(self.access_key_id) != bool(self.secret_access_key):
            raise ConfigurationError(
                "Storage access_key_id and secret_access_key must be set together"
            )


@dataclass(frozen=True)
class TableSchema:
    """Table name plus its CREATE statement as reported by the server."""
    name: str
    create_statement: str


@dataclass
class RowWindow:
    """One page of rows fetched with LIMIT offset, limit."""
    offset: int
    rows: list[tuple[Any, ...]]
    column_count: int

    def __len__(self) -> int:
        return len(self.rows)


@dataclass
class TableStats:
    """Statistics for a single table dump."""
    table: str
    rows_dumped: int = 0
    batches: int = 0


@dataclass
class UploadResult:
    """Terminal report of the compress/upload step."""
    success: bool
    key: Optional[str] = None
    url: Optional[str] = None
    local_path: Optional[Path] = None
    error: Optional[str] = None


@dataclass
class DumpResult:
    """Overall outcome of one run."""
    success: bool = False
    artifact_path: Optional[Path] = None
    tables: list[TableStats] = field(default_factory=list)
    upload: Optional[UploadResult] = None
    error: Optional[str] = None

    @property
    def total_rows(self) -> int:
        return sum(t.rows_dumped for t in self.tables)
