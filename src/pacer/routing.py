"""Identity-keyed registry of live windows and queues."""

import logging
import threading
import weakref
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

H = TypeVar("H")

logger = logging.getLogger(__name__)


class _Sentinel:
    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return self._name


# Receiver used for plain function calls.
GLOBAL: Any = _Sentinel("GLOBAL")

# Group used by callers that only need one handle per receiver.
DEFAULT_GROUP: Any = _Sentinel("DEFAULT_GROUP")


class IdentityKey:
    """Hashable handle comparing by the identity of *obj*."""

    __slots__ = ("obj",)

    def __init__(self, obj: object) -> None:
        self.obj = obj

    def __hash__(self) -> int:
        return id(self.obj)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, IdentityKey) and other.obj is self.obj

    def __repr__(self) -> str:
        return f"IdentityKey({self.obj!r})"


def group_key(group: Any) -> Hashable:
    """Use hashable groups as-is, wrap the rest so they compare by identity."""
    try:
        hash(group)
    except TypeError:
        return IdentityKey(group)
    return group


@dataclass(slots=True)
class _Bucket:
    anchor: Any
    handles: dict[Hashable, Any] = field(default_factory=dict)

    @property
    def receiver(self) -> Any:
        if isinstance(self.anchor, weakref.ref):
            return self.anchor()
        return self.anchor


class RoutingTable(Generic[H]):
    """Maps ``(receiver, group)`` to the handle currently serving it.

    Receivers are compared by identity, never by ``__eq__``. Receivers that
    support weak references are held weakly, so a bucket disappears with
    its instance; others (and :data:`GLOBAL`) are held strongly.

    Handles are created lazily by :meth:`get_or_create`. The factory gets a
    ``release`` callback that removes exactly that handle, once; releasing
    a handle that has already been replaced is a no-op.

    Example::

        table: RoutingTable[SerialQueue] = RoutingTable()
        queue = table.get_or_create(GLOBAL, "db", lambda release: SerialQueue())
        assert table.get(GLOBAL, "db") is queue
    """

    __slots__ = ("_buckets", "_dead", "_lock")

    def __init__(self) -> None:
        self._buckets: dict[int, _Bucket] = {}
        self._dead: list[tuple[int, weakref.ref[Any]]] = []
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            self._purge()
            return sum(len(bucket.handles) for bucket in self._buckets.values())

    def get(self, receiver: Any = GLOBAL, group: Any = DEFAULT_GROUP) -> H | None:
        """Return the live handle for ``(receiver, group)``, if any."""
        with self._lock:
            self._purge()
            bucket = self._live_bucket(receiver)
            if bucket is None:
                return None
            return bucket.handles.get(group_key(group))

    def get_or_create(
        self,
        receiver: Any,
        group: Any,
        factory: Callable[[Callable[[], None]], H],
        stale: Callable[[H], bool] | None = None,
    ) -> H:
        """Return the live handle, building it with ``factory(release)`` if absent.

        A live handle for which *stale* returns true is dropped and replaced
        in the same step.
        """
        key = group_key(group)
        with self._lock:
            self._purge()
            bucket = self._live_bucket(receiver)
            if bucket is not None and key in bucket.handles:
                current = bucket.handles[key]
                if stale is None or not stale(current):
                    return current
                del bucket.handles[key]
                logger.debug("Replacing stale %r for %r/%r", current, receiver, key)
            if bucket is None:
                bucket = _Bucket(anchor=self._anchor(receiver))
            owner_bucket = bucket

            # Resolved through the anchor so an open handle never keeps its receiver alive.
            def release() -> None:
                owner = owner_bucket.receiver
                if owner is not None:
                    self.discard(owner, key, handle)

            handle = factory(release)
            self._buckets[id(receiver)] = bucket
            bucket.handles[key] = handle
            logger.debug("Routed %r/%r to new %r", receiver, key, handle)
            return handle

    def discard(self, receiver: Any, group: Any, handle: H) -> bool:
        """Remove *handle* if it still serves ``(receiver, group)``."""
        key = group_key(group)
        with self._lock:
            self._purge()
            bucket = self._live_bucket(receiver)
            if bucket is None or bucket.handles.get(key) is not handle:
                return False
            del bucket.handles[key]
            if not bucket.handles:
                del self._buckets[id(receiver)]
            logger.debug("Released %r for %r/%r", handle, receiver, key)
            return True

    def clear(self) -> None:
        with self._lock:
            self._buckets.clear()
            self._dead.clear()

    def _live_bucket(self, receiver: Any) -> _Bucket | None:
        bucket = self._buckets.get(id(receiver))
        if bucket is None or bucket.receiver is not receiver:
            return None
        return bucket

    def _anchor(self, receiver: Any) -> Any:
        ident = id(receiver)
        dead = self._dead
        try:
            # The callback may run inside GC at any point; it only records.
            return weakref.ref(receiver, lambda ref: dead.append((ident, ref)))
        except TypeError:
            return receiver

    def _purge(self) -> None:
        while self._dead:
            ident, ref = self._dead.pop()
            bucket = self._buckets.get(ident)
            if bucket is not None and bucket.anchor is ref:
                del self._buckets[ident]

    def __repr__(self) -> str:
        return f"RoutingTable(handles={len(self)})"
