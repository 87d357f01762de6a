##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
CLI module for reading and writing records of a key-value store.

This module defines the `keys`, `get`, `put` and `del` subcommands. Each one
opens the store named by `--url`, performs a single operation and closes the
store again. Values are read and printed as JSON.
"""

# pylint: disable=duplicate-code

import json
import logging
import sys
from argparse import ArgumentParser, Namespace

from ipc_keyval.cli.commands.command_entry_point import CommandEntryPoint


LOG = logging.getLogger(__name__)

_MISSING = object()


class KeysCommand(CommandEntryPoint):
    """
    Handles the `keys` CLI command for listing the keys of a store.

    Methods:
        add_parser: Adds the `keys` command to the CLI parser.
        process_command: Prints the matching keys, one per line, sorted.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `keys` command parser to the CLI argument parser.

        Parameters:
            subparsers: The subparsers object to which the `keys` command parser will be added.
        """
        keys: ArgumentParser = subparsers.add_parser("keys", help="List the keys of the store.")
        keys.set_defaults(func=self.process_command)
        keys.add_argument(
            "pattern",
            nargs="?",
            default=None,
            help="Only list keys matching this glob pattern ('*' matches one or more characters).",
        )

    def process_command(self, args: Namespace):
        """
        CLI command to list keys.

        Args:
            args: Parsed CLI arguments.
        """
        with self.create_store(args) as kv:
            for key in sorted(kv.keys(args.pattern)):
                print(key)


class GetCommand(CommandEntryPoint):
    """
    Handles the `get` CLI command for printing the value stored under a key.

    Methods:
        add_parser: Adds the `get` command to the CLI parser.
        process_command: Prints the value as JSON, exiting with 1 if the key is absent.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `get` command parser to the CLI argument parser.

        Parameters:
            subparsers: The subparsers object to which the `get` command parser will be added.
        """
        get: ArgumentParser = subparsers.add_parser("get", help="Print the value stored under a key.")
        get.set_defaults(func=self.process_command)
        get.add_argument("key", help="The key to look up.")
        get.add_argument("--indent", type=int, default=None, help="Pretty-print the JSON with this indent.")

    def process_command(self, args: Namespace):
        """
        CLI command to print a value.

        Args:
            args: Parsed CLI arguments.
        """
        with self.create_store(args) as kv:
            value = kv.get(args.key, _MISSING)
        if value is _MISSING:
            LOG.error(f"Key '{args.key}' not found.")
            sys.exit(1)
        print(json.dumps(value, indent=args.indent, sort_keys=True))


class PutCommand(CommandEntryPoint):
    """
    Handles the `put` CLI command for storing a value under a key.

    Methods:
        add_parser: Adds the `put` command to the CLI parser.
        process_command: Parses the value as JSON (or takes it verbatim with `--raw`) and stores it.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `put` command parser to the CLI argument parser.

        Parameters:
            subparsers: The subparsers object to which the `put` command parser will be added.
        """
        put: ArgumentParser = subparsers.add_parser("put", help="Store a JSON value under a key.")
        put.set_defaults(func=self.process_command)
        put.add_argument("key", help="The key to store the value under.")
        put.add_argument("value", help="The value, as JSON text.")
        put.add_argument(
            "--raw",
            action="store_true",
            default=False,
            help="Store the value argument as a plain string instead of parsing it as JSON.",
        )

    def process_command(self, args: Namespace):
        """
        CLI command to store a value.

        Args:
            args: Parsed CLI arguments.

        Raises:
            ValueError: If the value is not valid JSON and `--raw` wasn't given.
        """
        if args.raw:
            value = args.value
        else:
            try:
                value = json.loads(args.value)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Value is not valid JSON (use --raw to store it as a string): {exc}") from exc

        with self.create_store(args) as kv:
            kv.put(args.key, value)
        LOG.info(f"Stored value under key '{args.key}'.")


class DeleteCommand(CommandEntryPoint):
    """
    Handles the `del` CLI command for removing a key.

    Methods:
        add_parser: Adds the `del` command to the CLI parser.
        process_command: Removes the key (absent keys are not an error).
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `del` command parser to the CLI argument parser.

        Parameters:
            subparsers: The subparsers object to which the `del` command parser will be added.
        """
        delete: ArgumentParser = subparsers.add_parser("del", help="Remove a key from the store.")
        delete.set_defaults(func=self.process_command)
        delete.add_argument("key", help="The key to remove.")

    def process_command(self, args: Namespace):
        """
        CLI command to remove a key.

        Args:
            args: Parsed CLI arguments.
        """
        with self.create_store(args) as kv:
            kv.delete(args.key)
        LOG.info(f"Deleted key '{args.key}'.")
