##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
The `backends` package contains everything that talks to the database backing
a key-value store.

Subpackages:
    - `mysql`: MySQL/MariaDB connection through PyMySQL.
    - `sqlite`: SQLite connection for stores shared through a local database file.

Modules:
    backend_factory: Selects the connection class from the URL scheme.
    connection_base: Lifecycle, statement execution and error mapping shared by all backends.
    record_store: The get/put/delete/keys protocol on top of a connection.
    utils: Value serialization and glob-to-regex translation.
"""
