##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
Module of all IPC-KeyVal-specific exception types.

Every exception raised on purpose by this package derives from `KeyValError`,
so callers can catch the whole family with a single `except` clause. Errors
coming from a database driver or a lock primitive are chained onto the
matching exception here with `raise ... from`.
"""

__all__ = (
    "KeyValError",
    "ConfigurationError",
    "AlreadyOpenError",
    "NotOpenError",
    "NotAcquiredError",
    "AlreadyAcquiredError",
    "KeyValConnectionError",
    "SchemaError",
    "QueryError",
    "SerializationError",
    "InvalidKeyError",
    "LockError",
    "LockTimeoutError",
    "BackendNotSupportedError",
    "LockNotSupportedError",
)


class KeyValError(Exception):
    """
    Base class for every error raised by IPC-KeyVal.
    """


class ConfigurationError(KeyValError):
    """
    Exception to signal that the connection target can't be turned into
    a usable configuration (e.g. the URL has no database path).
    """


class AlreadyOpenError(KeyValError):
    """
    Exception to signal that `open` was called on a store that is already open.
    """


class NotOpenError(KeyValError):
    """
    Exception to signal that an operation needs an open store but the
    store was never opened or has already been closed.
    """


class NotAcquiredError(KeyValError):
    """
    Exception to signal that `release` was called without a held lock.
    """


class AlreadyAcquiredError(KeyValError):
    """
    Exception to signal that `acquire` was called while this store
    already holds the lock.
    """


class KeyValConnectionError(KeyValError):
    """
    Exception to signal that a connection to the backing database could
    not be established, including failures to load TLS material.
    """


class SchemaError(KeyValError):
    """
    Exception to signal that the key-value table could not be created.
    """


class QueryError(KeyValError):
    """
    Exception to signal that a statement (CRUD or transaction control)
    failed on the backing database.
    """


class SerializationError(KeyValError):
    """
    Exception to signal that a value could not be encoded to, or decoded
    from, its stored text form.
    """


class InvalidKeyError(KeyValError):
    """
    Exception to signal that a key can't be stored, e.g. because it is longer
    than the key column allows.
    """


class LockError(KeyValError):
    """
    Exception to signal that the named lock could not be obtained or released.
    """


class LockTimeoutError(LockError):
    """
    Exception to signal that the named lock was not granted within the
    requested timeout.
    """


class BackendNotSupportedError(KeyValError):
    """
    Exception to signal that the URL scheme does not name a supported backend.
    """


class LockNotSupportedError(KeyValError):
    """
    Exception to signal that the requested lock type is not supported.
    """
