##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
CLI module for displaying the resolved configuration of a store.

The `info` command never connects to the database; it only shows what a
connection would use, which is handy for checking a URL before deploying it.
"""

# pylint: disable=duplicate-code

import logging
from argparse import ArgumentParser, Namespace
from dataclasses import asdict

from tabulate import tabulate

from ipc_keyval import VERSION
from ipc_keyval.backends.backend_factory import backend_factory
from ipc_keyval.cli.commands.command_entry_point import CommandEntryPoint
from ipc_keyval.locks.lock_factory import lock_factory


LOG = logging.getLogger(__name__)


class InfoCommand(CommandEntryPoint):
    """
    Handles `info` CLI command for viewing the resolved store configuration.

    Methods:
        add_parser: Adds the `info` command to the CLI parser.
        process_command: Prints the resolved options and the available backends and locks.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `info` command parser to the CLI argument parser.

        Parameters:
            subparsers: The subparsers object to which the `info` command parser will be added.
        """
        info: ArgumentParser = subparsers.add_parser(
            "info",
            help="display the resolved store configuration and the available backends and locks.",
        )
        info.set_defaults(func=self.process_command)

    def process_command(self, args: Namespace):
        """
        CLI command to print the store configuration.

        Args:
            args: Parsed CLI arguments.
        """
        print(f"ipc-keyval {VERSION}")
        print(f"backends: {', '.join(sorted(backend_factory.list_available()))}")
        print(f"locks: {', '.join(sorted(lock_factory.list_available()))}")

        if not args.url:
            LOG.warning("No connection URL given; skipping store configuration.")
            return

        kv = self.create_store(args)
        rows = [("url", kv.target.redacted()), ("backend", kv.connection.dialect)]
        rows.extend(asdict(kv.options).items())
        print(tabulate(rows, headers=["Option", "Value"]))
