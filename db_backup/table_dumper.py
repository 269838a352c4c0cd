"""
Table dumping functionality for the database backup tool.
"""

import logging
from typing import Iterable, Iterator, Optional

from .models import RowWindow, TableSchema, TableStats
from .progress import ProgressReporter
from .row_batcher import RowBatcher
from .utils import quote_identifier


class TableDumper:
    """Produces the DROP/CREATE/INSERT section for individual tables."""

    DEFAULT_BATCH_SIZE = 1000
    PROGRESS_WIDTH = 50

    def __init__(
        self,
        connection,
        reporter: ProgressReporter,
        batch_size: int = DEFAULT_BATCH_SIZE,
        ignore_tables: Iterable[str] = ()
    ):
        self.connection = connection
        self.reporter = reporter
        self.batch_size = batch_size
        self.ignore_tables = frozenset(ignore_tables)
        self.batcher = RowBatcher(connection, batch_size)

    def dump(self, table: str, stats: Optional[TableStats] = None) -> Iterator[str]:
        """
        Yield the SQL chunks that recreate ``table``.

        Nothing is yielded for ignored tables. Each chunk is produced only
        when the caller asks for it, so rows for the next window are not
        fetched until the previous chunk has been consumed.
        """
        if table in self.ignore_tables:
            logging.debug(f"Skipping ignored table '{table}'")
            return

        stats = stats if stats is not None else TableStats(table=table)
        padding = "." * max(self.PROGRESS_WIDTH - len(table), 0)
        self.reporter.report(f"Backing up `{table}` table...{padding}", 0, 0)

        schema = TableSchema(table, self.connection.get_create_table(table))
        yield self.render_schema(schema)

        total_rows = self.connection.get_row_count(table)
        logging.debug(f"Table '{table}' has {total_rows} row(s)")
        windows = self._counted(self.batcher.windows(table, total_rows), stats)
        yield from self.batcher.render(table, windows)

        yield "\n\n"
        self.reporter.report("OK")

    @staticmethod
    def render_schema(schema: TableSchema) -> str:
        return (
            f"DROP TABLE IF EXISTS {quote_identifier(schema.name)};"
            f"\n\n{schema.create_statement};\n\n"
        )

    @staticmethod
    def _counted(windows: Iterable[RowWindow], stats: TableStats) -> Iterator[RowWindow]:
        for window in windows:
            stats.batches += 1
            stats.rows_dumped += len(window)
            yield window
