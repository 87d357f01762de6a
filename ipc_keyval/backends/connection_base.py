##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
Abstract base class for database connections in the IPC-KeyVal application.

This module defines `ConnectionBase`, which owns the single database handle of
a key-value store. It implements the open/close lifecycle, creation of the
key-value table, statement execution and transaction control, and maps driver
exceptions onto IPC-KeyVal's own error types. Concrete subclasses (MySQL,
SQLite) provide the driver-specific connect/disconnect logic and the parts of
the SQL dialect that differ between databases.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Sequence, Tuple, Type

from ipc_keyval.backends.utils import regex_literal
from ipc_keyval.config.options import ConnectionTarget, KeyValOptions
from ipc_keyval.exceptions import AlreadyOpenError, KeyValConnectionError, NotOpenError, QueryError, SchemaError


LOG = logging.getLogger(__name__)

KEY_LENGTH = 128


class ConnectionBase(ABC):
    """
    Base class for a connection to the database backing a key-value store.

    Attributes:
        dialect (str): The name of the SQL dialect (e.g. "mysql").
        placeholder (str): The parameter marker used by the driver.
        backslash_escapes (bool): Whether string literals treat backslash as an escape.
        begin_statement (str): The statement that starts a transaction.
        driver_errors (Tuple[Type[Exception], ...]): Exceptions raised by the driver.
        target (config.options.ConnectionTarget): The parsed connection URL.
        options (config.options.KeyValOptions): The resolved store options.
        handle (Any): The driver connection while open, None otherwise.
        opened (bool): True between a successful `open` and the following `close`.

    Methods:
        open: Connect to the database and make sure the key-value table exists.
        close: Terminate the connection.
        ensure_open: Raise `NotOpenError` if the connection isn't open.
        execute: Run a statement and return its rows.
        begin: Start a transaction.
        commit: Commit the current transaction.
        rollback: Roll back the current transaction.
        create_table_sql: Statement creating the key-value table if absent.
        upsert_sql: Statement inserting or overwriting a single row.
        regexp_sql: Condition matching a column against a regular expression.
    """

    dialect: str = None
    placeholder: str = "%s"
    backslash_escapes: bool = False
    begin_statement: str = "START TRANSACTION"
    driver_errors: Tuple[Type[Exception], ...] = ()

    def __init__(self, target: ConnectionTarget, options: KeyValOptions):
        """
        Initialize the connection in its closed state.

        Args:
            target: The parsed connection URL.
            options: The resolved store options.
        """
        self.target: ConnectionTarget = target
        self.options: KeyValOptions = options
        self.handle: Any = None
        self.opened: bool = False

    @abstractmethod
    def _connect(self) -> Any:
        """
        Establish the driver connection.

        Returns:
            The driver connection object.
        """
        raise NotImplementedError("Subclasses of `ConnectionBase` must implement a `_connect` method.")

    @abstractmethod
    def _disconnect(self):
        """
        Close the driver connection held in `self.handle`.
        """
        raise NotImplementedError("Subclasses of `ConnectionBase` must implement a `_disconnect` method.")

    @abstractmethod
    def upsert_sql(self) -> str:
        """
        Build the statement that inserts a row or overwrites the value of an existing one.

        The statement takes three parameters: the key, the value, and the value again.

        Returns:
            The upsert statement.
        """
        raise NotImplementedError("Subclasses of `ConnectionBase` must implement an `upsert_sql` method.")

    def create_table_sql(self) -> str:
        """
        Build the idempotent statement creating the key-value table.

        Returns:
            The `CREATE TABLE IF NOT EXISTS` statement.
        """
        table, col_key, col_val = self.options.table, self.options.col_key, self.options.col_val
        return (
            f"CREATE TABLE IF NOT EXISTS {table} "
            f"({col_key} VARCHAR({KEY_LENGTH}), {col_val} TEXT, PRIMARY KEY ({col_key}))"
        )

    def regexp_sql(self, column: str, regex: str) -> str:
        """
        Build a condition matching `column` against `regex`.

        Args:
            column: The column to test.
            regex: The regular expression, embedded as a quoted literal.

        Returns:
            An SQL boolean expression.
        """
        return f"{column} REGEXP {regex_literal(regex, self.backslash_escapes)}"

    def open(self):
        """
        Connect to the database and make sure the key-value table exists.

        Raises:
            AlreadyOpenError: If the connection is already open.
            KeyValConnectionError: If the connection can't be established.
            SchemaError: If the table can't be created.
        """
        if self.opened:
            raise AlreadyOpenError("Key-value store is already opened.")

        LOG.debug(f"Connecting to {self.target.redacted()}...")
        try:
            self.handle = self._connect()
        except self.driver_errors as exc:
            raise KeyValConnectionError(f"Failed to connect to {self.target.redacted()}: {exc}") from exc

        try:
            self._execute(self.create_table_sql())
        except self.driver_errors as exc:
            self._discard_handle()
            raise SchemaError(f"Failed to create table '{self.options.table}': {exc}") from exc

        self.opened = True
        LOG.debug(f"Connected to {self.target.redacted()} using table '{self.options.table}'.")

    def close(self):
        """
        Terminate the connection.

        Raises:
            NotOpenError: If the connection isn't open.
            KeyValConnectionError: If the driver fails to close the connection.
        """
        self.ensure_open()
        try:
            self._disconnect()
        except self.driver_errors as exc:
            raise KeyValConnectionError(f"Failed to close connection to {self.target.redacted()}: {exc}") from exc
        finally:
            self.handle = None
            self.opened = False
        LOG.debug(f"Closed connection to {self.target.redacted()}.")

    def _discard_handle(self):
        """Close a half-opened handle, keeping the error that caused the discard."""
        try:
            self._disconnect()
        except self.driver_errors as exc:
            LOG.warning(f"Failed to close connection after error: {exc}")
        self.handle = None

    def ensure_open(self):
        """
        Check that the connection is open.

        Raises:
            NotOpenError: If the connection isn't open.
        """
        if not self.opened:
            raise NotOpenError("Key-value store is still not opened.")

    def _execute(self, sql: str, params: Sequence = None) -> List[tuple]:
        """
        Run a statement on the driver connection without any checks or error mapping.

        Args:
            sql: The statement to run.
            params: Parameters bound to the statement's placeholders.

        Returns:
            The rows produced by the statement (empty for statements without a result set).
        """
        cursor = self.handle.cursor()
        try:
            if params:
                cursor.execute(sql, params)
            else:
                cursor.execute(sql)
            return list(cursor.fetchall()) if cursor.description else []
        finally:
            cursor.close()

    def execute(self, sql: str, params: Sequence = None) -> List[tuple]:
        """
        Run a statement and return its rows.

        Args:
            sql: The statement to run.
            params: Parameters bound to the statement's placeholders.

        Returns:
            The rows produced by the statement as tuples.

        Raises:
            NotOpenError: If the connection isn't open.
            QueryError: If the database rejects the statement.
        """
        self.ensure_open()
        LOG.debug(f"Executing: {sql}")
        try:
            return self._execute(sql, params)
        except self.driver_errors as exc:
            raise QueryError(f"Statement failed: {exc}") from exc

    def begin(self):
        """Start a transaction."""
        self.execute(self.begin_statement)

    def commit(self):
        """Commit the current transaction."""
        self.execute("COMMIT")

    def rollback(self):
        """Roll back the current transaction."""
        self.execute("ROLLBACK")
