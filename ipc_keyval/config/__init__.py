##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
The `config` package turns a connection URL into IPC-KeyVal's configuration.

Modules:
    options: Parses a connection target and resolves it into `KeyValOptions`.
"""

from ipc_keyval.config.options import ConnectionTarget, KeyValOptions, parse_target, resolve_options


__all__ = ["ConnectionTarget", "KeyValOptions", "parse_target", "resolve_options"]
