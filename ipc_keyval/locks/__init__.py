##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
The `locks` package couples a named mutual-exclusion lock with a database
transaction to give callers short critical sections.

Modules:
    named_lock: Named-lock primitives backed by lock files or by Redis.
    lock_factory: Selects the named-lock primitive from the store options.
    lock_coordinator: Drives the acquire/begin and commit/release sequence.
"""
