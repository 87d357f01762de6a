##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
Fixtures for files in this `cli/` test directory.
"""

from argparse import ArgumentParser, Namespace

import pytest

from ipc_keyval.cli.commands.command_entry_point import CommandEntryPoint
from tests.fixture_types import FixtureCallable, FixtureStr


@pytest.fixture
def create_parser() -> FixtureCallable:
    """
    A fixture to help create a parser for any command.

    Returns:
        A function that creates a parser.
    """

    def _create_parser(cmd: CommandEntryPoint) -> ArgumentParser:
        """
        Returns an `ArgumentParser` configured with the `cmd` command and its subcommands.

        Returns:
            Parser with the `cmd` command and its subcommands registered.
        """
        parser = ArgumentParser()
        subparsers = parser.add_subparsers(dest="main_command")
        cmd.add_parser(subparsers)
        return parser

    return _create_parser


@pytest.fixture
def parse_command(create_parser: FixtureCallable, keyval_url: FixtureStr) -> FixtureCallable:
    """
    A fixture to parse a command line for a single command, pointed at the
    test's SQLite store the way the main parser's `--url` option would.

    Args:
        create_parser: A fixture returning a function that creates a parser.
        keyval_url: A SQLite connection URL in a temporary directory.

    Returns:
        A function that parses the arguments of a command.
    """

    def _parse_command(cmd: CommandEntryPoint, argv: list) -> Namespace:
        """
        Parse `argv` with a parser holding only `cmd`.

        Args:
            cmd: The command to register.
            argv: The command line, starting with the command name.

        Returns:
            The parsed arguments with `url` set.
        """
        args = create_parser(cmd).parse_args(argv)
        args.url = keyval_url
        return args

    return _parse_command
