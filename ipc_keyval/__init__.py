##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
IPC-KeyVal: Inter-Process-Communication Key-Value Storage.

This module contains the source code for IPC-KeyVal. The main entry point
for library users is `ipc_keyval.keyval.KeyVal`.
"""

__version__ = "1.2.0"
VERSION = __version__
