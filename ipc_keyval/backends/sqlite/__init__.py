##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
SQLite backend for IPC-KeyVal.

Modules:
    sqlite_connection: Connects to a local SQLite database file shared by several processes.
"""
