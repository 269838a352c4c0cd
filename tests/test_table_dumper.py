"""
Unit tests for table_dumper.py
"""

from unittest import mock

import pytest

from db_backup.exceptions import QueryError
from db_backup.models import TableSchema, TableStats
from db_backup.table_dumper import TableDumper

from conftest import FakeConnection


class TestTableDumper:
    """Tests for TableDumper class."""

    def test_init(self, shop_connection, reporter):
        """Test TableDumper initialization."""
        dumper = TableDumper(shop_connection, reporter, 500, ["tbl_token_auth"])
        assert dumper.connection == shop_connection
        assert dumper.batch_size == 500
        assert dumper.ignore_tables == frozenset({"tbl_token_auth"})
        assert dumper.batcher.batch_size == 500

    def test_init_default_batch_size(self, shop_connection, reporter):
        """Test default batch size when not specified."""
        dumper = TableDumper(shop_connection, reporter)
        assert dumper.batch_size == TableDumper.DEFAULT_BATCH_SIZE


class TestRenderSchema:
    """Tests for the DROP/CREATE header."""

    def test_schema_chunk(self):
        schema = TableSchema("users", "CREATE TABLE `users` (`id` int)")
        assert TableDumper.render_schema(schema) == (
            "DROP TABLE IF EXISTS `users`;\n\n"
            "CREATE TABLE `users` (`id` int);\n\n"
        )


class TestDump:
    """Tests for dump method."""

    def test_full_table_section(self, shop_connection, reporter):
        dumper = TableDumper(shop_connection, reporter)

        sql = "".join(dumper.dump("users"))

        assert sql == (
            "DROP TABLE IF EXISTS `users`;\n\n"
            "CREATE TABLE `users` (`id` int, `name` varchar(255));\n\n"
            'INSERT INTO `users` VALUES (1,"alice"),\n'
            '(2,"bob");\n'
            "\n\n"
        )

    def test_ignored_table_yields_nothing(self, shop_connection, reporter, console):
        dumper = TableDumper(shop_connection, reporter, ignore_tables={"tbl_token_auth"})

        assert list(dumper.dump("tbl_token_auth")) == []
        assert shop_connection.fetches == []
        assert console.getvalue() == ""

    def test_empty_table_has_no_insert(self, reporter):
        conn = FakeConnection({"empty": ("CREATE TABLE `empty` (`id` int)", [])})
        dumper = TableDumper(conn, reporter)

        sql = "".join(dumper.dump("empty"))

        assert "INSERT" not in sql
        assert conn.fetches == [("empty", 0, 1000)]

    def test_batch_size_one(self, shop_connection, reporter):
        dumper = TableDumper(shop_connection, reporter, batch_size=1)

        sql = "".join(dumper.dump("users"))

        assert sql.count("INSERT INTO `users` VALUES") == 2
        assert 'INSERT INTO `users` VALUES (1,"alice");\n' in sql
        assert 'INSERT INTO `users` VALUES (2,"bob");\n' in sql

    def test_stats_collected(self, shop_connection, reporter):
        dumper = TableDumper(shop_connection, reporter, batch_size=1)
        stats = TableStats(table="users")

        list(dumper.dump("users", stats))

        assert stats.rows_dumped == 2
        assert stats.batches == 3

    def test_progress_lines(self, shop_connection, reporter, console):
        dumper = TableDumper(shop_connection, reporter)

        list(dumper.dump("users"))

        output = console.getvalue()
        assert output.startswith("2024-01-15 10:30:45 - Backing up `users` table...")
        assert "." * (TableDumper.PROGRESS_WIDTH - len("users")) in output
        assert output.endswith("2024-01-15 10:30:45 - OK\n")

    def test_query_error_propagates(self, reporter):
        conn = mock.MagicMock()
        conn.get_create_table.side_effect = QueryError("Table 'shop.users' doesn't exist")
        dumper = TableDumper(conn, reporter)

        with pytest.raises(QueryError):
            list(dumper.dump("users"))

    def test_generator_does_not_prefetch(self, shop_connection, reporter):
        dumper = TableDumper(shop_connection, reporter, batch_size=1)
        chunks = dumper.dump("users")

        next(chunks)  # schema
        assert shop_connection.fetches == []
        next(chunks)  # first row
        assert shop_connection.fetches == [("users", 0, 1)]
