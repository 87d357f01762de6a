##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
Key-value record store for the IPC-KeyVal application.

This module defines `RecordStore`, which implements the key-value protocol
(`keys`, `put`, `get`, `delete`) as single SQL statements against the table of
a `ConnectionBase`. Values are stored as canonical JSON text.
"""

import logging
from typing import Any, Optional, Set

from ipc_keyval.backends.connection_base import KEY_LENGTH, ConnectionBase
from ipc_keyval.backends.utils import deserialize_value, glob_to_regex, serialize_value
from ipc_keyval.exceptions import InvalidKeyError


LOG = logging.getLogger(__name__)


class RecordStore:
    """
    CRUD operations on the key-value table of a connection.

    Every method requires the connection to be open and raises `NotOpenError`
    otherwise. Statement failures surface as `QueryError`.

    Attributes:
        connection (backends.connection_base.ConnectionBase): The connection owning the table.

    Methods:
        keys: List all keys, optionally filtered by a glob pattern.
        put: Insert or overwrite the value stored under a key.
        get: Retrieve the value stored under a key.
        delete: Remove a key.
    """

    def __init__(self, connection: ConnectionBase):
        """
        Initialize the store.

        Args:
            connection: The connection owning the key-value table.
        """
        self.connection: ConnectionBase = connection

    def keys(self, pattern: Optional[str] = None) -> Set[str]:
        """
        List the keys in the store.

        Args:
            pattern: An optional glob pattern; "*" matches one or more characters
                and every other character matches itself.

        Returns:
            The set of matching keys (possibly empty).
        """
        conn = self.connection
        col_key = conn.options.col_key
        sql = f"SELECT {col_key} FROM {conn.options.table}"
        if pattern is not None:
            sql += f" WHERE {conn.regexp_sql(col_key, glob_to_regex(pattern))}"
        rows = conn.execute(sql)
        return {row[0] for row in rows}

    def put(self, key: str, value: Any):
        """
        Store `value` under `key`, replacing any previous value.

        Args:
            key: The key (at most 128 characters).
            value: Any JSON-serializable value.

        Raises:
            InvalidKeyError: If the key is longer than 128 characters.
            SerializationError: If the value can't be serialized.
        """
        conn = self.connection
        conn.ensure_open()
        if len(key) > KEY_LENGTH:
            raise InvalidKeyError(f"Key of {len(key)} characters exceeds the limit of {KEY_LENGTH}.")
        text = serialize_value(value)
        conn.execute(conn.upsert_sql(), (key, text, text))
        LOG.debug(f"Stored value under key '{key}'.")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Retrieve the value stored under `key`.

        Args:
            key: The key to look up.
            default: Returned when the key is absent. Pass a sentinel to tell an
                absent key apart from a stored `None`.

        Returns:
            The stored value, or `default` if the key is absent.

        Raises:
            SerializationError: If the stored text can't be decoded.
        """
        conn = self.connection
        opts = conn.options
        rows = conn.execute(
            f"SELECT {opts.col_val} FROM {opts.table} WHERE {opts.col_key} = {conn.placeholder}",
            (key,),
        )
        if not rows:
            return default
        return deserialize_value(rows[0][0])

    def delete(self, key: str):
        """
        Remove `key` from the store. Removing an absent key is not an error.

        Args:
            key: The key to remove.
        """
        conn = self.connection
        opts = conn.options
        conn.execute(f"DELETE FROM {opts.table} WHERE {opts.col_key} = {conn.placeholder}", (key,))
        LOG.debug(f"Deleted key '{key}'.")
