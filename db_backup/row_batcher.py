"""
Paginated row fetching and multi-row INSERT rendering.
"""

import logging
from typing import Any, Callable, Iterable, Iterator

from .encoder import encode_value
from .models import RowWindow
from .utils import quote_identifier


class RowBatcher:
    """
    Splits a table into LIMIT/OFFSET windows and renders each non-empty
    window as one INSERT statement.

    Windows are fetched lazily, so a consumer that persists each rendered
    chunk before asking for the next one keeps at most one batch in memory.
    """

    def __init__(
        self,
        connection,
        batch_size: int,
        encode: Callable[[Any], str] = encode_value
    ):
        self.connection = connection
        self.batch_size = batch_size
        self.encode = encode

    def batch_count(self, total_rows: int) -> int:
        """
        Number of windows fetched for ``total_rows`` rows.

        Always one more than the number of full batches, so an exact
        multiple of the batch size (or an empty table) still issues a
        trailing fetch that comes back empty.
        """
        return total_rows // self.batch_size + 1

    def windows(self, table: str, total_rows: int) -> Iterator[RowWindow]:
        """Fetch the table window by window."""
        for batch in range(1, self.batch_count(total_rows) + 1):
            offset = (batch - 1) * self.batch_size
            logging.debug(f"Fetching `{table}` rows {offset}..{offset + self.batch_size - 1}")
            yield self.connection.fetch_rows(table, offset, self.batch_size)

    def render(self, table: str, windows: Iterable[RowWindow]) -> Iterator[str]:
        """Render windows into INSERT chunks, skipping empty ones."""
        for window in windows:
            if not window.rows:
                continue
            yield self.render_window(table, window)

    def render_window(self, table: str, window: RowWindow) -> str:
        values = ",\n".join(
            f"({','.join(self.encode(value) for value in row)})"
            for row in window.rows
        )
        return f"INSERT INTO {quote_identifier(table)} VALUES {values};\n"
