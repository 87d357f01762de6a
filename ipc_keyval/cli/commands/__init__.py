##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
IPC-KeyVal CLI Commands Package.

Modules:
    command_entry_point: Defines the abstract base class `CommandEntryPoint` for all CLI commands.
    info: Implements the `info` command for displaying the resolved store configuration.
    records: Implements the `keys`, `get`, `put` and `del` commands.
"""

from ipc_keyval.cli.commands.info import InfoCommand
from ipc_keyval.cli.commands.records import DeleteCommand, GetCommand, KeysCommand, PutCommand


# Keep these in alphabetical order
ALL_COMMANDS = [
    DeleteCommand(),
    GetCommand(),
    InfoCommand(),
    KeysCommand(),
    PutCommand(),
]
