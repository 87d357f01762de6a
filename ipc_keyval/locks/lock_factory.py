##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
Lock factory for selecting the named-lock primitive of a key-value store.

Additional primitives can be published by other packages under the
`ipc_keyval.locks` entry point group.
"""

from typing import Any, Type

from ipc_keyval.abstracts import KeyValBaseFactory
from ipc_keyval.exceptions import LockNotSupportedError
from ipc_keyval.locks.named_lock import FileNamedLock, NamedLock, RedisNamedLock


class KeyValLockFactory(KeyValBaseFactory):
    """
    Factory class for managing and instantiating named-lock primitives.

    Methods:
        register: Register a new lock class and optional aliases.
        list_available: Return a list of supported lock names.
        create: Instantiate a lock class by name.
        get_component_info: Return metadata about a registered lock.
    """

    def _register_builtins(self):
        """
        Register built-in lock implementations.
        """
        self.register("file", FileNamedLock, aliases=["filelock"])
        self.register("redis", RedisNamedLock)

    def _validate_component(self, component_class: Any):
        """
        Ensure registered component is a subclass of NamedLock.

        Args:
            component_class: The class to validate.

        Raises:
            TypeError: If the component does not subclass NamedLock.
        """
        if not isinstance(component_class, type) or not issubclass(component_class, NamedLock):
            raise TypeError(f"{component_class} must inherit from NamedLock")

    def _entry_point_group(self) -> str:
        """
        Entry point group used for discovering lock plugins.

        Returns:
            The entry point namespace for IPC-KeyVal lock plugins.
        """
        return "ipc_keyval.locks"

    def _raise_component_error_class(self, msg: str) -> Type[Exception]:
        """
        Raise an appropriate exception for unsupported locks.

        Args:
            msg: The message to add to the error being raised.
        """
        raise LockNotSupportedError(msg)


lock_factory = KeyValLockFactory()
