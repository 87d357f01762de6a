##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
MySQL/MariaDB connection for the IPC-KeyVal application.

This module defines `MySQLConnection`, which talks to a MySQL or MariaDB server
through PyMySQL. Statements run in autocommit mode so that every `put`, `get`,
`delete` and `keys` call outside of a lock is its own atomic statement.

Transport encryption is enabled as soon as the URL carries any of the `tls`,
`ca`, `key` or `crt` query parameters. All TLS material is loaded before the
first network packet is sent, so a missing file never leaves a half-open
connection behind.
"""

import logging
import ssl
from typing import Any, Dict

import pymysql

from ipc_keyval.backends.connection_base import ConnectionBase
from ipc_keyval.exceptions import KeyValConnectionError


LOG = logging.getLogger(__name__)

DEFAULT_PORT = 3306


class MySQLConnection(ConnectionBase):
    """
    A `ConnectionBase` implementation for MySQL and MariaDB using PyMySQL.

    Methods:
        build_config: Build the keyword arguments passed to `pymysql.connect`.
        build_ssl_context: Build the TLS context from the configured CA, key and certificate.
        upsert_sql: `INSERT ... ON DUPLICATE KEY UPDATE` statement.
    """

    dialect = "mysql"
    placeholder = "%s"
    backslash_escapes = True
    begin_statement = "START TRANSACTION"
    driver_errors = (pymysql.MySQLError,)

    def build_config(self) -> Dict[str, Any]:
        """
        Build the keyword arguments passed to `pymysql.connect`.

        Returns:
            The PyMySQL connection configuration.

        Raises:
            KeyValConnectionError: If TLS material can't be loaded.
        """
        config = {
            "host": self.target.hostname or "localhost",
            "port": self.target.port or DEFAULT_PORT,
            "database": self.options.database,
            "charset": "utf8mb4",
            "autocommit": True,
        }
        if self.target.username is not None:
            config["user"] = self.target.username
            config["password"] = self.target.password or ""
        if self.options.tls:
            config["ssl"] = self.build_ssl_context()
        return config

    def _read_tls_file(self, path: str, description: str) -> str:
        """
        Read a PEM file used for the TLS handshake.

        Args:
            path: The path to the file.
            description: What the file holds, for error messages.

        Returns:
            The file content.

        Raises:
            KeyValConnectionError: If the file can't be read.
        """
        try:
            with open(path, "r") as pem_file:
                return pem_file.read()
        except OSError as exc:
            raise KeyValConnectionError(f"Failed to read TLS {description} '{path}': {exc}") from exc

    def build_ssl_context(self) -> ssl.SSLContext:
        """
        Build the TLS context for the connection.

        Without a CA the server certificate is not verified. With a CA, the
        server certificate must chain up to it.

        Returns:
            The TLS context handed to PyMySQL.

        Raises:
            KeyValConnectionError: If any of the TLS files can't be loaded.
        """
        options = self.options
        try:
            if options.ca_path is not None:
                ca_data = self._read_tls_file(options.ca_path, "CA certificate")
                context = ssl.create_default_context(cadata=ca_data)
            else:
                context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
                context.check_hostname = False
                context.verify_mode = ssl.CERT_NONE

            if options.cert_path is not None:
                self._read_tls_file(options.cert_path, "certificate")
                if options.key_path is not None:
                    self._read_tls_file(options.key_path, "private key")
                context.load_cert_chain(certfile=options.cert_path, keyfile=options.key_path)
            elif options.key_path is not None:
                self._read_tls_file(options.key_path, "private key")
                LOG.warning("A TLS private key was given without a certificate; the key will not be used.")
        except OSError as exc:  # includes ssl.SSLError
            raise KeyValConnectionError(f"Failed to load TLS material: {exc}") from exc

        return context

    def _connect(self) -> pymysql.connections.Connection:
        """
        Establish the PyMySQL connection.

        Returns:
            The PyMySQL connection object.
        """
        return pymysql.connect(**self.build_config())

    def _disconnect(self):
        """
        Close the PyMySQL connection.
        """
        self.handle.close()

    def upsert_sql(self) -> str:
        """
        Build the MySQL upsert statement.

        Returns:
            An `INSERT ... ON DUPLICATE KEY UPDATE` statement taking (key, value, value).
        """
        table, col_key, col_val = self.options.table, self.options.col_key, self.options.col_val
        return (
            f"INSERT INTO {table} ({col_key}, {col_val}) VALUES (%s, %s) "
            f"ON DUPLICATE KEY UPDATE {col_val} = %s"
        )
