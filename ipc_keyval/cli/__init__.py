##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
The `cli` package holds the `ipc-keyval` command-line interface.

Modules:
    argparse_main: Builds the main argument parser.

Subpackages:
    commands: One `CommandEntryPoint` implementation per subcommand.
"""
