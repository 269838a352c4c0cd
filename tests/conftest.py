"""
Shared fixtures: an in-memory stand-in for DatabaseConnection.
"""

import io
from datetime import datetime

import pytest

from db_backup.models import RowWindow
from db_backup.progress import ProgressReporter


class FakeConnection:
    """Serves tables from memory and records every fetch."""

    def __init__(self, tables):
        # tables: {name: (create_statement, [rows])}, insertion-ordered
        self.tables = tables
        self.fetches = []
        self.entered = False
        self.exited = False

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.exited = True

    def get_tables(self):
        return list(self.tables)

    def get_create_table(self, table):
        return self.tables[table][0]

    def get_row_count(self, table):
        return len(self.tables[table][1])

    def fetch_rows(self, table, offset, limit):
        self.fetches.append((table, offset, limit))
        rows = self.tables[table][1][offset:offset + limit]
        width = len(rows[0]) if rows else 0
        return RowWindow(offset=offset, rows=list(rows), column_count=width)


FIXED_NOW = datetime(2024, 1, 15, 10, 30, 45)


@pytest.fixture
def console():
    return io.StringIO()


@pytest.fixture
def reporter(console):
    return ProgressReporter(stream=console, clock=lambda: FIXED_NOW)


@pytest.fixture
def shop_connection():
    return FakeConnection({
        "users": (
            "CREATE TABLE `users` (`id` int, `name` varchar(255))",
            [(1, "alice"), (2, "bob")],
        ),
        "tbl_token_auth": (
            "CREATE TABLE `tbl_token_auth` (`token` varchar(64))",
            [("secret-token",)],
        ),
    })
