"""
Database connection management for the database backup tool.
"""

import logging
from typing import Optional

import mysql.connector
from mysql.connector import Error as MySQLError

from .exceptions import DatabaseConnectionError, QueryError
from .models import RowWindow
from .utils import quote_identifier


class DatabaseConnection:
    """Manages a MySQL connection with context manager support."""

    DEFAULT_PORT = 3306
    DEFAULT_CHARSET = 'utf8'

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        database: Optional[str] = None,
        charset: str = DEFAULT_CHARSET
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.charset = charset
        self.connection = None

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    def connect(self) -> None:
        """Establish database connection."""
        try:
            self.connection = mysql.connector.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password,
                database=self.database,
                charset=self.charset,
                use_unicode=True
            )
        except MySQLError as e:
            logging.error(f"Failed to connect to database: {e}")
            raise DatabaseConnectionError(f"ERROR connecting database: {e}") from e
        logging.info(f"Connected to {self.host}:{self.port}/{self.database or 'N/A'}")

    def disconnect(self) -> None:
        """Close database connection."""
        if self.connection and self.connection.is_connected():
            self.connection.close()
            logging.debug("Database connection closed")

    def execute_query(self, query: str, params: Optional[tuple] = None) -> tuple[list[tuple], int]:
        """Execute a query and return its rows and column count."""
        logging.debug(f"Executing: {query} {params or ''}")
        try:
            cursor = self.connection.cursor()
            try:
                cursor.execute(query, params)
                rows = cursor.fetchall()
                column_count = len(cursor.description) if cursor.description else 0
            finally:
                cursor.close()
        except MySQLError as e:
            raise QueryError(f"Query failed ({query}): {e}") from e
        return rows, column_count

    def get_tables(self) -> list[str]:
        """Get list of all tables in the current database."""
        rows, _ = self.execute_query("SHOW TABLES")
        return [row[0] for row in rows]

    def get_create_table(self, table: str) -> str:
        """Get CREATE TABLE statement."""
        rows, _ = self.execute_query(f"SHOW CREATE TABLE {quote_identifier(table)}")
        if not rows:
            raise QueryError(f"No CREATE statement returned for table '{table}'")
        return rows[0][1]

    def get_row_count(self, table: str) -> int:
        """Get row count for a table."""
        rows, _ = self.execute_query(f"SELECT COUNT(*) FROM {quote_identifier(table)}")
        return int(rows[0][0])

    def fetch_rows(self, table: str, offset: int, limit: int) -> RowWindow:
        """Fetch one window of rows in server order."""
        rows, column_count = self.execute_query(
            f"SELECT * FROM {quote_identifier(table)} LIMIT %s, %s",
            (offset, limit)
        )
        return RowWindow(offset=offset, rows=rows, column_count=column_count)
