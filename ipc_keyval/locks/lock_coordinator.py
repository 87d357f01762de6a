##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
Coupling of a named lock with a database transaction.

`LockCoordinator` gives a key-value store its critical sections: acquiring
grants the named lock and then starts a transaction on the store's connection;
releasing commits that transaction and only then gives the lock back. Every
`put`, `get`, `delete` and `keys` issued in between becomes visible to other
lock holders all at once.

`KeyValLock` is the handle returned to callers. It can be released explicitly
or used as a context manager:

    with kv.acquire():
        counter = kv.get("counter", 0)
        kv.put("counter", counter + 1)
"""

import logging
from types import TracebackType
from typing import Any, Callable, Optional, Type

from ipc_keyval.backends.connection_base import ConnectionBase
from ipc_keyval.exceptions import AlreadyAcquiredError, LockError, NotAcquiredError, QueryError
from ipc_keyval.locks.named_lock import NamedLock


LOG = logging.getLogger(__name__)


class LockCoordinator:
    """
    Drives the lock/transaction state machine of one key-value store.

    The coordinator is either idle, or holds the named lock together with an
    open transaction. The only in-between state is reached when a commit
    succeeded but the unlock failed; calling `release` again then retries the
    unlock without committing twice.

    Attributes:
        connection (backends.connection_base.ConnectionBase): The store's connection.
        named_lock (locks.named_lock.NamedLock): The lock primitive.
        held (bool): True while the named lock is held.
        transaction_open (bool): True while the paired transaction is open.
        generation (int): Counts acquisitions, so handles can tell their own lock from a later one.

    Methods:
        acquire: Obtain the lock and open a transaction.
        release: Commit the transaction and give the lock back.
        abort: Roll back the transaction and give the lock back.
    """

    def __init__(self, connection: ConnectionBase, named_lock: NamedLock):
        """
        Initialize an idle coordinator.

        Args:
            connection: The store's connection.
            named_lock: The lock primitive to drive.
        """
        self.connection: ConnectionBase = connection
        self.named_lock: NamedLock = named_lock
        self.held: bool = False
        self.transaction_open: bool = False
        self.generation: int = 0
        self._token: Any = None

    def acquire(self, timeout: Optional[float] = None) -> "KeyValLock":
        """
        Obtain the named lock, blocking while another holder has it, then
        start a transaction.

        Args:
            timeout: Seconds to wait for the lock, or None to wait forever.

        Returns:
            A `KeyValLock` handle for releasing the lock.

        Raises:
            NotOpenError: If the connection isn't open.
            AlreadyAcquiredError: If this coordinator already holds the lock.
            LockTimeoutError: If `timeout` expired.
            LockError: If the lock primitive failed.
            QueryError: If the transaction couldn't be started.
        """
        self.connection.ensure_open()
        if self.held:
            raise AlreadyAcquiredError("Lock is already acquired by this key-value store.")

        token = self.named_lock.acquire(timeout)
        try:
            self.connection.begin()
        except QueryError:
            try:
                self.named_lock.release(token)
            except LockError as exc:
                LOG.error(f"Failed to give back lock '{self.named_lock.name}' after a failed transaction start: {exc}")
            raise

        self._token = token
        self.generation += 1
        self.held = True
        self.transaction_open = True
        LOG.debug(f"Acquired lock '{self.named_lock.name}'.")
        return KeyValLock(self)

    def _finish(self, end_transaction: Callable[[], None]):
        """
        End the transaction with `end_transaction`, then give the lock back.

        Bookkeeping is cleared only once the unlock succeeded.

        Args:
            end_transaction: Either `connection.commit` or `connection.rollback`.
        """
        self.connection.ensure_open()
        if not self.held:
            raise NotAcquiredError("Lock is still not acquired.")

        if self.transaction_open:
            end_transaction()
            self.transaction_open = False

        self.named_lock.release(self._token)
        self._token = None
        self.held = False
        LOG.debug(f"Released lock '{self.named_lock.name}'.")

    def release(self):
        """
        Commit the transaction and give the lock back.

        Raises:
            NotOpenError: If the connection isn't open.
            NotAcquiredError: If the lock isn't held.
            QueryError: If the commit failed; the lock is still held.
            LockError: If the unlock failed; the transaction is committed but the lock is still marked as held.
        """
        self._finish(self.connection.commit)

    def abort(self):
        """
        Roll back the transaction and give the lock back.

        Raises:
            NotOpenError: If the connection isn't open.
            NotAcquiredError: If the lock isn't held.
            QueryError: If the rollback failed; the lock is still held.
            LockError: If the unlock failed.
        """
        self._finish(self.connection.rollback)


class KeyValLock:
    """
    Caller-side handle on a held lock.

    Releasing the handle commits the critical section. When used as a context
    manager, a clean exit commits and an exit by exception rolls back; either
    way the lock is given back.

    Methods:
        release: Commit the critical section and give the lock back.
    """

    def __init__(self, coordinator: LockCoordinator):
        """
        Initialize the handle.

        Args:
            coordinator: The coordinator that granted the lock.
        """
        self._coordinator: LockCoordinator = coordinator
        self._generation: int = coordinator.generation

    @property
    def held(self) -> bool:
        """True until this handle's lock has been released."""
        return self._coordinator.held and self._coordinator.generation == self._generation

    def release(self):
        """
        Commit the critical section and give the lock back.

        Raises:
            NotAcquiredError: If the lock was already released.
        """
        if not self.held:
            raise NotAcquiredError("Lock was already released.")
        self._coordinator.release()

    def __enter__(self) -> "KeyValLock":
        return self

    def __exit__(self, exc_type: Type[Exception], exc_value: Exception, traceback: TracebackType):
        if not self.held:
            return
        if exc_type is None:
            self.release()
        else:
            LOG.debug(f"Rolling back critical section after {exc_type.__name__}.")
            self._coordinator.abort()
