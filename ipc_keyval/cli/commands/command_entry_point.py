##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
Defines the abstract base class for IPC-KeyVal CLI commands.

This module provides the `CommandEntryPoint` abstract base class that all
command implementations must inherit from. It standardizes the interface
for adding command-specific argument parsers and processing CLI command logic.
"""

from abc import ABC, abstractmethod
from argparse import ArgumentParser, Namespace

from ipc_keyval.exceptions import ConfigurationError
from ipc_keyval.keyval import KeyVal


class CommandEntryPoint(ABC):
    """
    Abstract base class for an IPC-KeyVal CLI command entry point.

    Methods:
        add_parser: Adds the parser for a specific command to the main `ArgumentParser`.
        process_command: Executes the logic for this CLI command.
        create_store: Builds the (closed) store named by the `--url` argument.
    """

    @abstractmethod
    def add_parser(self, subparsers: ArgumentParser):
        """Add the parser for this command to the main `ArgumentParser`."""
        raise NotImplementedError("Subclasses of `CommandEntryPoint` must implement an `add_parser` method.")

    @abstractmethod
    def process_command(self, args: Namespace):
        """Execute the logic for this CLI command."""
        raise NotImplementedError("Subclasses of `CommandEntryPoint` must implement an `process_command` method.")

    def create_store(self, args: Namespace) -> KeyVal:
        """
        Build the store named by the `--url` argument.

        Args:
            args: Parsed CLI arguments.

        Returns:
            A closed `KeyVal` instance.

        Raises:
            ConfigurationError: If no URL was given.
        """
        if not getattr(args, "url", None):
            raise ConfigurationError("No connection URL given. Use --url or set IPC_KEYVAL_URL.")
        return KeyVal(args.url)
