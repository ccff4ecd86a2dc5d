#
#
#

"""Serialization of zone writes.

Every write to a zone makes the Edge DNS service bump the zone's SOA serial.
Two writes racing from the same process can have their serial increments
applied out of order, so mutating calls go through a ``WriteGate`` which lets
at most one of them be in flight per scope at a time.

By default a gate has a single lock shared by all zones. With
``per_zone=True`` each zone gets its own lock and writes to unrelated zones
may proceed concurrently.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Operation(Enum):
    CREATE = 'create'
    UPDATE = 'update'
    DELETE = 'delete'
    READ = 'read'

    @property
    def mutating(self) -> bool:
        return self is not Operation.READ


@dataclass(frozen=True)
class MutationRequest:
    """A single mutating call against a zone.

    Args:
        scope: Zone name the mutation applies to
        operation: One of the mutating ``Operation`` members
        payload: Record data sent with the request, if any
        serialize: When False the caller takes responsibility for ordering
            and the gate is bypassed
    """

    scope: str
    operation: Operation
    payload: Any = None
    serialize: bool = True


class WriteGate:
    """Mutual exclusion for zone writes.

    Acquisition blocks without a timeout. Locks are not reentrant and
    re-acquiring from the holding thread raises ``RuntimeError``. With
    ``per_zone=True`` one lock is kept for every zone ever written; they are
    never discarded.
    """

    _GLOBAL = None

    def __init__(self, per_zone: bool = False):
        self.per_zone = per_zone
        self._registry_lock = threading.Lock()
        self._locks: Dict[Optional[str], threading.Lock] = {}
        self._owners: Dict[Optional[str], int] = {}

    def _key(self, scope: Optional[str]) -> Optional[str]:
        return scope if self.per_zone else self._GLOBAL

    def _lock_for(self, key: Optional[str]) -> Tuple[threading.Lock, bool]:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            held = self._owners.get(key) == threading.get_ident()
        return lock, held

    def acquire(self, request: MutationRequest) -> bool:
        """Take the lock for ``request.scope``.

        Returns:
            True when the lock was taken, False when the request opted out
        """
        if not request.operation.mutating:
            raise ValueError(
                f'{request.operation.value} requests are not serialized'
            )
        if not request.serialize:
            return False
        key = self._key(request.scope)
        lock, held = self._lock_for(key)
        if held:
            raise RuntimeError(
                f'write gate already held by this thread (scope={key})'
            )
        lock.acquire()
        try:
            self._set_owner(key)
        except BaseException:
            lock.release()
            raise
        return True

    def _set_owner(self, key: Optional[str]) -> None:
        with self._registry_lock:
            self._owners[key] = threading.get_ident()

    def release(self, request: MutationRequest) -> None:
        """Release the lock for ``request.scope`` if this thread holds it."""
        key = self._key(request.scope)
        with self._registry_lock:
            if self._owners.get(key) != threading.get_ident():
                return
            del self._owners[key]
            lock = self._locks[key]
        lock.release()

    @contextmanager
    def hold(self, request: MutationRequest):
        acquired = self.acquire(request)
        try:
            yield acquired
        finally:
            if acquired:
                self.release(request)

    def locked(self, scope: Optional[str] = None) -> bool:
        key = self._key(scope)
        with self._registry_lock:
            lock = self._locks.get(key)
        return lock is not None and lock.locked()
