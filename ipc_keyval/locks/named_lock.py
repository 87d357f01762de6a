##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
Named mutual-exclusion lock primitives.

A named lock grants exclusive access to whoever holds the agreed-upon name.
Every key-value store contends on the same name, `LOCK_NAME`, regardless of
the database or table it targets.

Two primitives are available:

- `FileNamedLock` (the default) locks a file in a shared directory, which
  serializes every process on the host.
- `RedisNamedLock` locks a key on a Redis server, which serializes processes
  on every host that can reach the server.

`acquire` returns an opaque release token that must be handed back to
`release`; callers never inspect it.
"""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

import redis
from filelock import FileLock, Timeout
from redis.exceptions import RedisError
from redis.lock import Lock as RedisLock

from ipc_keyval.config.options import KeyValOptions
from ipc_keyval.exceptions import ConfigurationError, LockError, LockTimeoutError


LOG = logging.getLogger(__name__)

LOCK_NAME = "IPC-KeyVal"
LOCK_DIR_ENV = "IPC_KEYVAL_LOCK_DIR"


class NamedLock(ABC):
    """
    Base class for named-lock primitives.

    Attributes:
        name (str): The name every holder agrees on.

    Methods:
        acquire: Block until the lock is granted and return a release token.
        release: Give the lock back using the token from `acquire`.
    """

    def __init__(self, name: str, options: KeyValOptions):
        """
        Initialize the lock.

        Args:
            name: The name every holder agrees on.
            options: The resolved store options.
        """
        self.name: str = name
        self.options: KeyValOptions = options

    @abstractmethod
    def acquire(self, timeout: Optional[float] = None) -> Any:
        """
        Block until the lock is granted.

        Args:
            timeout: Seconds to wait before giving up, or None to wait forever.

        Returns:
            An opaque token required by `release`.

        Raises:
            LockTimeoutError: If `timeout` expired before the lock was granted.
            LockError: If the lock primitive failed.
        """
        raise NotImplementedError("Subclasses of `NamedLock` must implement an `acquire` method.")

    @abstractmethod
    def release(self, token: Any):
        """
        Give the lock back.

        Args:
            token: The token returned by `acquire`.

        Raises:
            LockError: If the lock primitive failed.
        """
        raise NotImplementedError("Subclasses of `NamedLock` must implement a `release` method.")

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}>"


class FileNamedLock(NamedLock):
    """
    A named lock held on `<lock_dir>/<name>.lock` through `filelock`.

    The directory is, in order of precedence, the `lockDir` URL option, the
    `IPC_KEYVAL_LOCK_DIR` environment variable, or the system temp directory.
    Each acquisition opens its own lock file handle, so two stores in the same
    process exclude each other just like two stores in different processes.
    """

    def __init__(self, name: str, options: KeyValOptions):
        super().__init__(name, options)
        lock_dir = options.lock_dir or os.environ.get(LOCK_DIR_ENV) or tempfile.gettempdir()
        self.path: str = os.path.join(lock_dir, f"{name}.lock")

    def acquire(self, timeout: Optional[float] = None) -> FileLock:
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        lock = FileLock(self.path, thread_local=False)  # pylint: disable=abstract-class-instantiated
        LOG.debug(f"Waiting for lock file '{self.path}'...")
        try:
            lock.acquire(timeout=-1 if timeout is None else timeout)
        except Timeout as exc:
            raise LockTimeoutError(f"Lock '{self.name}' was not granted within {timeout} seconds.") from exc
        except OSError as exc:
            raise LockError(f"Failed to lock '{self.path}': {exc}") from exc
        return lock

    def release(self, token: FileLock):
        try:
            token.release()
        except OSError as exc:
            raise LockError(f"Failed to unlock '{self.path}': {exc}") from exc


class RedisNamedLock(NamedLock):
    """
    A named lock held on a Redis server through `redis-py`'s `Lock`.

    The server is given by the `lockUrl` URL option, e.g.
    `?lock=redis&lockUrl=redis://lockhost:6379/0`. The lock has no expiry,
    matching the file lock: it stays held until released.
    """

    def __init__(self, name: str, options: KeyValOptions):
        super().__init__(name, options)
        if not options.lock_url:
            raise ConfigurationError("The 'redis' lock requires a 'lockUrl' option naming the Redis server.")
        self.client: redis.Redis = redis.Redis.from_url(options.lock_url)

    def acquire(self, timeout: Optional[float] = None) -> RedisLock:
        lock = self.client.lock(self.name, thread_local=False)
        LOG.debug(f"Waiting for Redis lock '{self.name}'...")
        try:
            acquired = lock.acquire(blocking=True, blocking_timeout=timeout)
        except RedisError as exc:
            raise LockError(f"Failed to acquire Redis lock '{self.name}': {exc}") from exc
        if not acquired:
            raise LockTimeoutError(f"Lock '{self.name}' was not granted within {timeout} seconds.")
        return lock

    def release(self, token: RedisLock):
        try:
            token.release()
        except RedisError as exc:
            raise LockError(f"Failed to release Redis lock '{self.name}': {exc}") from exc
