##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
SQLite connection for the IPC-KeyVal application.

This module defines `SQLiteConnection`, which lets processes on the same host
share a key-value store through a common SQLite database file. The URL path is
the file path, so an absolute path needs four slashes:

    sqlite:////var/lib/coord/keyval.db

SQLite has no built-in `REGEXP` implementation, so one backed by Python's `re`
module is registered on every connection.
"""

import logging
import re
import sqlite3
import sys
from pathlib import Path

from ipc_keyval.backends.connection_base import ConnectionBase


LOG = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"


def _regexp(pattern: str, value: str) -> bool:
    """
    Implementation of SQLite's `value REGEXP pattern` operator.

    The pattern must cover the whole value and "." also matches newlines, so
    "^abc$" rejects "abc\\n" and "^a.+$" accepts "a\\nb".

    Args:
        pattern: The regular expression.
        value: The column value to test.

    Returns:
        True if `pattern` matches all of `value`.
    """
    if value is None:
        return False
    return re.fullmatch(pattern, value, re.DOTALL) is not None


class SQLiteConnection(ConnectionBase):
    """
    A `ConnectionBase` implementation for SQLite database files.

    The connection runs in autocommit mode (transactions are opened explicitly
    by the lock coordinator), uses the WAL journal for better concurrent access,
    and may be used from threads other than the one that opened it.

    Methods:
        upsert_sql: `INSERT ... ON CONFLICT DO UPDATE` statement.
    """

    dialect = "sqlite"
    placeholder = "?"
    backslash_escapes = False
    begin_statement = "BEGIN IMMEDIATE"
    driver_errors = (sqlite3.Error,)

    def _connect(self) -> sqlite3.Connection:
        """
        Open and configure the SQLite connection.

        Returns:
            A sqlite connection.
        """
        db_path = self.options.database
        if db_path != MEMORY_DATABASE:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        if self.options.tls:
            LOG.debug("TLS options are ignored for SQLite databases.")

        connection_kwargs = {"check_same_thread": False}
        if sys.version_info < (3, 12):  # Autocommit wasn't added until python 3.12
            connection_kwargs["isolation_level"] = None
        else:
            connection_kwargs["autocommit"] = True

        conn = sqlite3.connect(db_path, **connection_kwargs)
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.create_function("REGEXP", 2, _regexp, deterministic=True)
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    def _disconnect(self):
        """
        Close the SQLite connection.
        """
        self.handle.close()

    def upsert_sql(self) -> str:
        """
        Build the SQLite upsert statement.

        Returns:
            An `INSERT ... ON CONFLICT DO UPDATE` statement taking (key, value, value).
        """
        table, col_key, col_val = self.options.table, self.options.col_key, self.options.col_val
        return (
            f"INSERT INTO {table} ({col_key}, {col_val}) VALUES (?, ?) "
            f"ON CONFLICT ({col_key}) DO UPDATE SET {col_val} = ?"
        )
