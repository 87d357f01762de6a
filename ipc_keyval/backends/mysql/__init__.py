##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
MySQL/MariaDB backend for IPC-KeyVal.

Modules:
    mysql_connection: Connects through PyMySQL, optionally over TLS.
"""
