"""
Main database dumping orchestration for the database backup tool.
"""

import fnmatch
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Optional

from .artifact import DumpArtifact
from .connection import DatabaseConnection
from .exceptions import BackupError
from .models import ALL_TABLES, DumpRequest, DumpResult, TableStats
from .pipeline import ArtifactPipeline
from .progress import ProgressReporter
from .table_dumper import TableDumper
from .utils import backup_filename, quote_identifier


class DatabaseDumper:
    """
    Drives one backup run: connect, write the dump file table by table,
    then hand the finished file to the artifact pipeline.
    """

    def __init__(
        self,
        pipeline: Optional[ArtifactPipeline],
        reporter: Optional[ProgressReporter] = None,
        connection_factory: Callable[..., DatabaseConnection] = DatabaseConnection,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.pipeline = pipeline
        self.reporter = reporter or ProgressReporter()
        self.connection_factory = connection_factory
        self.clock = clock

    def _compile_exclusion_patterns(self, exclude_patterns: Iterable[str]) -> list[re.Pattern]:
        """
        Pre-compile exclusion patterns to regex for faster matching.

        Converts fnmatch patterns to compiled regex patterns.
        """
        return [re.compile(fnmatch.translate(pattern)) for pattern in exclude_patterns]

    def _is_table_excluded(
        self,
        table_name: str,
        exclude_tables: frozenset[str],
        compiled_patterns: Optional[list[re.Pattern]] = None
    ) -> bool:
        """
        Check if a table should be skipped.

        Supports exact names ('tbl_token_auth') and wildcard
        patterns ('*_old', 'tmp_*').
        """
        if table_name in exclude_tables:
            return True
        for compiled in compiled_patterns or []:
            if compiled.match(table_name):
                logging.debug(f"Table '{table_name}' excluded by pattern '{compiled.pattern}'")
                return True
        return False

    def run(self, request: DumpRequest) -> DumpResult:
        """
        Run a complete backup. Errors are reported and returned in the
        result, never raised.
        """
        result = DumpResult()
        try:
            request.validate()
            result.artifact_path = self._output_path(request)
            self._dump(request, result)
            if self.pipeline is None:
                result.success = True
                return result
            result.upload = self.pipeline.finalize(result.artifact_path, request.compress)
        except BackupError as e:
            result.error = str(e)
            self.reporter.error(f"Backup failed: {e}", 1, 1)
            return result
        except Exception as e:
            logging.exception("Unexpected error during backup")
            result.error = str(e)
            self.reporter.error(f"Backup failed: {e}", 1, 1)
            return result

        result.success = result.upload.success
        result.error = result.upload.error
        return result

    def _output_path(self, request: DumpRequest) -> Path:
        return Path(request.output_dir) / backup_filename(request.database, self.clock())

    def _dump(self, request: DumpRequest, result: DumpResult) -> None:
        with self.connection_factory(
            host=request.host,
            port=request.port,
            user=request.user,
            password=request.password,
            database=request.database,
            charset=request.charset
        ) as conn:
            tables = self._get_tables_to_dump(conn, request)
            logging.info(f"Dumping {len(tables)} table(s) from '{request.database}'")

            dumper = TableDumper(conn, self.reporter, request.batch_size, request.ignore_tables)
            with DumpArtifact(result.artifact_path) as artifact:
                artifact.append(self.preamble(request))

                for table in tables:
                    stats = TableStats(table=table)
                    result.tables.append(stats)
                    for chunk in dumper.dump(table, stats):
                        artifact.append(chunk)

                artifact.append(self.postamble(request))

        logging.info(
            f"Dump written to {result.artifact_path}: "
            f"{len(result.tables)} table(s), {result.total_rows} row(s)"
        )

    def _get_tables_to_dump(self, conn: DatabaseConnection, request: DumpRequest) -> list[str]:
        """Resolve the table list and drop ignored tables."""
        available = conn.get_tables() if request.tables == ALL_TABLES else None
        table_names = request.resolve_tables(available)

        wildcards = [p for p in request.ignore_tables if any(c in p for c in '*?[')]
        compiled_patterns = self._compile_exclusion_patterns(wildcards) if wildcards else None

        original_count = len(table_names)
        table_names = [
            t for t in table_names
            if not self._is_table_excluded(t, request.ignore_tables, compiled_patterns)
        ]
        excluded_count = original_count - len(table_names)
        if excluded_count > 0:
            logging.info(f"Excluded {excluded_count} table(s) matching exclusion list")
        return table_names

    @staticmethod
    def preamble(request: DumpRequest) -> str:
        db = quote_identifier(request.database)
        sql = f"CREATE DATABASE IF NOT EXISTS {db};\n\nUSE {db};\n\n"
        if request.disable_foreign_key_checks:
            sql += "SET foreign_key_checks = 0;\n\n"
        return sql

    @staticmethod
    def postamble(request: DumpRequest) -> str:
        if request.disable_foreign_key_checks:
            return "SET foreign_key_checks = 1;\n"
        return ""
