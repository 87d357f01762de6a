##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
Tests for the `sqlite_connection.py` module.

These tests run against real SQLite database files in a temporary directory.
"""

import sqlite3
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from ipc_keyval.backends.sqlite.sqlite_connection import SQLiteConnection, _regexp
from ipc_keyval.config.options import parse_target, resolve_options
from ipc_keyval.exceptions import AlreadyOpenError, KeyValConnectionError, NotOpenError, QueryError, SchemaError


def make_connection(url: str) -> SQLiteConnection:
    """
    Build a closed `SQLiteConnection` from a URL.

    Args:
        url: The SQLite connection URL.

    Returns:
        The connection.
    """
    target = parse_target(url)
    return SQLiteConnection(target, resolve_options(target))


@pytest.fixture
def sqlite_connection(tmp_path: Path) -> SQLiteConnection:
    """
    An opened SQLite connection on a fresh database file.

    Args:
        tmp_path: A built in pytest fixture providing a per-test temporary directory.

    Yields:
        The opened connection.
    """
    conn = make_connection(f"sqlite:///{tmp_path / 'store.db'}")
    conn.open()
    yield conn
    if conn.opened:
        conn.close()


class TestRegexpFunction:
    """Tests for the Python implementation of SQLite's REGEXP operator."""

    def test_matches(self):
        """Test that the pattern is searched in the value."""
        assert _regexp("^a.+$", "abc")
        assert not _regexp("^a.+$", "a")

    def test_null_value(self):
        """Test that NULL never matches."""
        assert not _regexp(".*", None)

    def test_wildcard_spans_newlines(self):
        """Test that "." matches a newline, so "*" patterns reach past it."""
        assert _regexp("^a.+$", "a\nb")

    def test_whole_value_must_match(self):
        """Test that a trailing newline isn't absorbed by the "$" anchor."""
        assert not _regexp("^abc$", "abc\n")
        assert _regexp("^abc$", "abc")


class TestSQLiteConnection:
    """Tests for the `SQLiteConnection` class."""

    def test_open_creates_file_and_table(self, tmp_path: Path):
        """
        Test that opening creates missing parent directories, the database file, and the table.

        Args:
            tmp_path: A built in pytest fixture providing a per-test temporary directory.
        """
        db_path = tmp_path / "nested" / "dir" / "store.db"
        conn = make_connection(f"sqlite:///{db_path}?table=Shared&colKey=k&colVal=v")
        conn.open()
        try:
            assert conn.opened
            assert db_path.exists()
            rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            assert ("Shared",) in rows
            columns = [row[1] for row in conn.execute("PRAGMA table_info(Shared)")]
            assert columns == ["k", "v"]
        finally:
            conn.close()

    def test_open_uses_wal_and_autocommit(self, sqlite_connection: SQLiteConnection):
        """
        Test the connection settings applied on open.

        Args:
            sqlite_connection: An opened SQLite connection.
        """
        assert sqlite_connection.execute("PRAGMA journal_mode") == [("wal",)]
        assert not sqlite_connection.handle.in_transaction

    def test_open_passes_autocommit_kwargs(self, tmp_path: Path, mocker: MockerFixture):
        """
        Test the keyword arguments handed to `sqlite3.connect`.

        Args:
            tmp_path: A built in pytest fixture providing a per-test temporary directory.
            mocker: PyTest mocker fixture.
        """
        mock_connect = mocker.patch("sqlite3.connect", return_value=MagicMock())
        db_path = tmp_path / "store.db"
        conn = make_connection(f"sqlite:///{db_path}")
        conn.open()

        autocommit_kwargs = {"autocommit": True} if sys.version_info >= (3, 12) else {"isolation_level": None}
        mock_connect.assert_called_once_with(str(db_path), check_same_thread=False, **autocommit_kwargs)
        mock_connect.return_value.execute.assert_any_call("PRAGMA journal_mode=WAL")

    def test_open_closes_handle_when_setup_fails(self, tmp_path: Path, mocker: MockerFixture):
        """
        Test that a failure while configuring a new SQLite connection closes it
        again and raises `KeyValConnectionError`.

        Args:
            tmp_path: A built in pytest fixture providing a per-test temporary directory.
            mocker: PyTest mocker fixture.
        """
        mock_conn = MagicMock()
        mock_conn.execute.side_effect = sqlite3.OperationalError("database is locked")
        mocker.patch("sqlite3.connect", return_value=mock_conn)
        conn = make_connection(f"sqlite:///{tmp_path / 'store.db'}")

        with pytest.raises(KeyValConnectionError):
            conn.open()

        mock_conn.close.assert_called_once()
        assert conn.handle is None
        assert not conn.opened

    def test_open_twice_raises(self, sqlite_connection: SQLiteConnection):
        """
        Test that opening an open connection raises `AlreadyOpenError`.

        Args:
            sqlite_connection: An opened SQLite connection.
        """
        with pytest.raises(AlreadyOpenError):
            sqlite_connection.open()
        assert sqlite_connection.opened

    def test_open_unreachable_database(self, tmp_path: Path):
        """
        Test that a database path that can't be opened raises `KeyValConnectionError`.

        Args:
            tmp_path: A built in pytest fixture providing a per-test temporary directory.
        """
        directory = tmp_path / "a_directory"
        directory.mkdir()
        conn = make_connection(f"sqlite:///{directory}")
        with pytest.raises(KeyValConnectionError):
            conn.open()
        assert not conn.opened
        assert conn.handle is None

    def test_open_invalid_table_name(self, tmp_path: Path):
        """
        Test that a table that can't be created raises `SchemaError` and leaves the connection closed.

        Args:
            tmp_path: A built in pytest fixture providing a per-test temporary directory.
        """
        conn = make_connection(f"sqlite:///{tmp_path / 'store.db'}?table=bad%20table")
        with pytest.raises(SchemaError):
            conn.open()
        assert not conn.opened
        assert conn.handle is None

    def test_close(self, sqlite_connection: SQLiteConnection):
        """
        Test that closing clears the handle and the opened flag.

        Args:
            sqlite_connection: An opened SQLite connection.
        """
        sqlite_connection.close()
        assert not sqlite_connection.opened
        assert sqlite_connection.handle is None
        with pytest.raises(NotOpenError):
            sqlite_connection.close()

    def test_close_unopened(self, tmp_path: Path):
        """
        Test that closing a connection that was never opened raises `NotOpenError`.

        Args:
            tmp_path: A built in pytest fixture providing a per-test temporary directory.
        """
        conn = make_connection(f"sqlite:///{tmp_path / 'store.db'}")
        with pytest.raises(NotOpenError, match="still not opened"):
            conn.close()

    def test_reopen_after_close(self, sqlite_connection: SQLiteConnection):
        """
        Test that a closed connection can be opened again and keeps its data.

        Args:
            sqlite_connection: An opened SQLite connection.
        """
        sqlite_connection.execute(sqlite_connection.upsert_sql(), ("k", '"v"', '"v"'))
        sqlite_connection.close()
        sqlite_connection.open()
        assert sqlite_connection.execute("SELECT name, val FROM KeyVal") == [("k", '"v"')]

    def test_execute_unopened(self, tmp_path: Path):
        """
        Test that running a statement on a closed connection raises `NotOpenError`.

        Args:
            tmp_path: A built in pytest fixture providing a per-test temporary directory.
        """
        conn = make_connection(f"sqlite:///{tmp_path / 'store.db'}")
        with pytest.raises(NotOpenError):
            conn.execute("SELECT 1")

    def test_execute_invalid_statement(self, sqlite_connection: SQLiteConnection):
        """
        Test that a rejected statement raises `QueryError` chained to the driver error.

        Args:
            sqlite_connection: An opened SQLite connection.
        """
        with pytest.raises(QueryError) as excinfo:
            sqlite_connection.execute("SELECT * FROM missing_table")
        assert isinstance(excinfo.value.__cause__, sqlite3.Error)

    def test_upsert_overwrites(self, sqlite_connection: SQLiteConnection):
        """
        Test that the upsert statement inserts and then overwrites a single row.

        Args:
            sqlite_connection: An opened SQLite connection.
        """
        sql = sqlite_connection.upsert_sql()
        sqlite_connection.execute(sql, ("k", "1", "1"))
        sqlite_connection.execute(sql, ("k", "2", "2"))
        assert sqlite_connection.execute("SELECT name, val FROM KeyVal") == [("k", "2")]

    def test_regexp_condition(self, sqlite_connection: SQLiteConnection):
        """
        Test that the REGEXP condition is evaluated by the registered Python function.

        Args:
            sqlite_connection: An opened SQLite connection.
        """
        sql = sqlite_connection.upsert_sql()
        for key in ("a.b", "axb", "it's"):
            sqlite_connection.execute(sql, (key, "0", "0"))

        condition = sqlite_connection.regexp_sql("name", "^a\\.b$")
        assert condition == "name REGEXP '^a\\.b$'"
        assert sqlite_connection.execute(f"SELECT name FROM KeyVal WHERE {condition}") == [("a.b",)]

        condition = sqlite_connection.regexp_sql("name", "^it's$")
        assert sqlite_connection.execute(f"SELECT name FROM KeyVal WHERE {condition}") == [("it's",)]

    def test_transaction_commit_and_rollback(self, sqlite_connection: SQLiteConnection):
        """
        Test that `begin`, `commit`, and `rollback` control an explicit transaction.

        Args:
            sqlite_connection: An opened SQLite connection.
        """
        sql = sqlite_connection.upsert_sql()

        sqlite_connection.begin()
        assert sqlite_connection.handle.in_transaction
        sqlite_connection.execute(sql, ("kept", "1", "1"))
        sqlite_connection.commit()
        assert not sqlite_connection.handle.in_transaction

        sqlite_connection.begin()
        sqlite_connection.execute(sql, ("dropped", "1", "1"))
        sqlite_connection.rollback()

        assert sqlite_connection.execute("SELECT name FROM KeyVal") == [("kept",)]

    def test_tls_options_ignored(self, tmp_path: Path):
        """
        Test that TLS options don't prevent opening a SQLite database.

        Args:
            tmp_path: A built in pytest fixture providing a per-test temporary directory.
        """
        conn = make_connection(f"sqlite:///{tmp_path / 'store.db'}?tls&ca=/does/not/exist.pem")
        conn.open()
        assert conn.opened
        conn.close()
