##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
Backend factory for selecting the database connection class of a key-value store.

This module defines the `KeyValBackendFactory` class, which maps URL schemes
(and their aliases) onto `ConnectionBase` implementations. Additional backends
can be published by other packages under the `ipc_keyval.backends` entry point
group.
"""

from typing import Any, Type

from ipc_keyval.abstracts import KeyValBaseFactory
from ipc_keyval.backends.connection_base import ConnectionBase
from ipc_keyval.backends.mysql.mysql_connection import MySQLConnection
from ipc_keyval.backends.sqlite.sqlite_connection import SQLiteConnection
from ipc_keyval.exceptions import BackendNotSupportedError


class KeyValBackendFactory(KeyValBaseFactory):
    """
    Factory class for managing and instantiating supported database connections.

    Attributes:
        _registry (Dict[str, ConnectionBase]): Maps canonical backend names to connection classes.
        _aliases (Dict[str, str]): Maps alternate URL schemes to canonical backend names.

    Methods:
        register: Register a new connection class and optional aliases.
        list_available: Return a list of supported backend names.
        create: Instantiate a connection class by URL scheme.
        get_component_info: Return metadata about a registered backend.
    """

    def _register_builtins(self):
        """
        Register built-in backend implementations.
        """
        self.register("mysql", MySQLConnection, aliases=["mariadb"])
        self.register("sqlite", SQLiteConnection, aliases=["sqlite3"])

    def _validate_component(self, component_class: Any):
        """
        Ensure registered component is a subclass of ConnectionBase.

        Args:
            component_class: The class to validate.

        Raises:
            TypeError: If the component does not subclass ConnectionBase.
        """
        if not isinstance(component_class, type) or not issubclass(component_class, ConnectionBase):
            raise TypeError(f"{component_class} must inherit from ConnectionBase")

    def _entry_point_group(self) -> str:
        """
        Entry point group used for discovering backend plugins.

        Returns:
            The entry point namespace for IPC-KeyVal backend plugins.
        """
        return "ipc_keyval.backends"

    def _raise_component_error_class(self, msg: str) -> Type[Exception]:
        """
        Raise an appropriate exception for unsupported backends.

        Args:
            msg: The message to add to the error being raised.
        """
        raise BackendNotSupportedError(msg)


backend_factory = KeyValBackendFactory()
