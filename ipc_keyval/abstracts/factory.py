##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
Name-based registry of pluggable component classes.

Backends and named-lock primitives are both picked by a short name taken from
the connection URL (its scheme, or the `lock` option). `KeyValBaseFactory`
keeps the name-to-class table for one kind of component, and lets other
installed packages add entries through an entry point group that is scanned
the first time a lookup misses.
"""

import logging
from abc import ABC, abstractmethod
from importlib.metadata import entry_points
from typing import Any, Dict, List, Type


LOG = logging.getLogger(__name__)


class KeyValBaseFactory(ABC):
    """
    Registry of component classes for one extension point.

    A concrete factory fills the table in `_register_builtins`, restricts what
    may be registered in `_validate_component`, and names its plugin group in
    `_entry_point_group`.

    Attributes:
        _registry (Dict[str, Any]): Canonical name -> component class.
        _aliases (Dict[str, str]): Alternate name -> canonical name.
        _plugins_loaded (bool): Whether the entry point group was already scanned.

    Methods:
        register: Add a component class under a name and optional aliases.
        resolve: Translate an alias into its canonical name.
        list_available: Canonical names of every known component.
        get_component_class: Look a class up by name or alias.
        create: Build an instance by name or alias.
        get_component_info: Describe a registered component.
    """

    def __init__(self):
        self._registry: Dict[str, Any] = {}
        self._aliases: Dict[str, str] = {}
        self._plugins_loaded: bool = False
        self._register_builtins()

    @abstractmethod
    def _register_builtins(self):
        """Fill the registry with the components shipped in this package."""
        raise NotImplementedError(f"{type(self).__name__} does not register any built-in components.")

    @abstractmethod
    def _validate_component(self, component_class: Any):
        """
        Reject classes that don't fit this extension point.

        Raises:
            TypeError: If `component_class` can't be registered here.
        """
        raise NotImplementedError(f"{type(self).__name__} does not validate components.")

    @abstractmethod
    def _entry_point_group(self) -> str:
        """Name of the entry point group holding third-party components."""
        raise NotImplementedError(f"{type(self).__name__} does not name an entry point group.")

    def _raise_component_error_class(self, msg: str) -> Type[Exception]:
        """
        Report an unknown component name. Factories override this with their own error type.

        Args:
            msg: Explanation of the lookup failure.
        """
        raise ValueError(msg)

    def _discover_plugins(self):
        """
        Register every class published under the entry point group. The scan
        happens at most once; a plugin that fails to import is skipped.
        """
        if self._plugins_loaded:
            return
        self._plugins_loaded = True

        group = self._entry_point_group()
        for entry_point in entry_points(group=group):
            try:
                self.register(entry_point.name, entry_point.load())
            except Exception as exc:  # pylint: disable=broad-exception-caught
                LOG.warning(f"Skipping plugin '{entry_point.name}' from '{group}': {exc}")
            else:
                LOG.info(f"Loaded plugin '{entry_point.name}' from '{group}'.")

    def register(self, name: str, component_class: Any, aliases: List[str] = None):
        """
        Add `component_class` to the registry.

        Args:
            name: The canonical name.
            component_class: The class to register.
            aliases: Other names that should resolve to `name`.

        Raises:
            TypeError: If `_validate_component` rejects the class.
        """
        self._validate_component(component_class)
        self._registry[name] = component_class
        self._aliases.update({alias: name for alias in aliases or []})
        LOG.debug(f"Registered '{name}' ({component_class.__name__}) with aliases {aliases or []}.")

    def resolve(self, component_type: str) -> str:
        """Canonical name for `component_type`, which is returned unchanged if it isn't an alias."""
        return self._aliases.get(component_type, component_type)

    def list_available(self) -> List[str]:
        """
        Canonical names of the built-in and plugin components.

        Returns:
            The registered names.
        """
        self._discover_plugins()
        return list(self._registry)

    def get_component_class(self, component_type: str) -> Any:
        """
        Find the class registered under a name or alias.

        Args:
            component_type: The requested name or alias.

        Returns:
            The registered class.
        """
        name = self.resolve(component_type)
        if name not in self._registry:
            self._discover_plugins()
        if name not in self._registry:
            known = ", ".join(self.list_available())
            self._raise_component_error_class(
                f"Component '{component_type}' is not supported. Available components: {known}"
            )
        return self._registry[name]

    def create(self, component_type: str, config: Dict = None) -> Any:
        """
        Build a component. Errors raised by its constructor reach the caller unchanged.

        Args:
            component_type: The name or alias of the component.
            config: Keyword arguments for the constructor.

        Returns:
            The new component.
        """
        component_class = self.get_component_class(component_type)
        LOG.debug(f"Creating '{self.resolve(component_type)}' component.")
        return component_class(**(config or {}))

    def get_component_info(self, component_type: str) -> Dict:
        """
        Describe a registered component, e.g. for the `info` command.

        Args:
            component_type: The name or alias of the component.

        Returns:
            The canonical name, class name, module and docstring of the component.
        """
        component_class = self.get_component_class(component_type)
        doc = (component_class.__doc__ or "").strip()
        return {
            "name": self.resolve(component_type),
            "class": component_class.__name__,
            "module": component_class.__module__,
            "description": doc or "No description available",
        }
