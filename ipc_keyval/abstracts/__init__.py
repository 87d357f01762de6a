##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
The `abstracts` package provides ABC classes that can be used throughout
IPC-KeyVal's codebase.

Modules:
    factory: Contains `KeyValBaseFactory`, used to manage pluggable backends and locks.
"""

from ipc_keyval.abstracts.factory import KeyValBaseFactory


__all__ = ["KeyValBaseFactory"]
