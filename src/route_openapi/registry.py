"""Handler-keyed operation registry.

Used for handlers that cannot be wrapped in documentation middleware: the
operation is registered against the handler object itself and looked up again
while the route table is walked.
"""

import inspect
import threading

from route_openapi.op import Handler, Operation


def _key(handler: Handler):
    # Bound methods are created anew on every attribute access.
    if inspect.ismethod(handler):
        return id(handler.__func__), id(handler.__self__)
    return id(handler)


class OperationRegistry:
    """Associates handlers with operations.

    Handlers are keyed by identity, so two distinct closures never share an
    entry even when they behave identically. A bound method is identified by
    its function and instance, so ``obj.method`` finds the entry registered
    through any other ``obj.method`` access, and falls back to an entry
    registered for the plain function (a decorated method). Registration and
    lookup are serialized by a single lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._ops: dict[object, tuple[Handler, Operation]] = {}

    def register(self, handler: Handler, op: Operation) -> None:
        """Insert or overwrite the operation of ``handler``."""
        with self._lock:
            # The handler is kept alive alongside its key so the ids are never reused.
            self._ops[_key(handler)] = (handler, op)

    def get(self, handler: Handler) -> Operation | None:
        """Return the operation registered for ``handler``, or None."""
        with self._lock:
            entry = self._ops.get(_key(handler))
            if entry is None and inspect.ismethod(handler):
                entry = self._ops.get(id(handler.__func__))
        if entry is None:
            return None
        return entry[1]

    def __len__(self) -> int:
        with self._lock:
            return len(self._ops)
