"""Route traversal primitives.

The generator only needs something with a ``walk()`` method yielding
``Route`` tuples. ``RouteTable`` is a small in-memory implementation that
can be used directly or as a model for web framework adapters.
"""

from collections.abc import Iterable, Iterator
from typing import NamedTuple, Protocol

from route_openapi.op import Handler, Middleware

METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE")


class Route(NamedTuple):
    """A registered route with the middleware applied to it, outermost first."""

    method: str
    path: str
    handler: Handler
    middlewares: tuple[Middleware, ...]


class Routes(Protocol):
    def walk(self) -> Iterable[Route]: ...


def _join(prefix: str, path: str) -> str:
    if not prefix:
        return path
    return prefix.rstrip("/") + path


class RouteTable:
    """Records routes and middleware in registration order.

    Middleware added with ``use`` applies to every route of the table,
    including routes of groups and mounted sub-tables.
    """

    def __init__(self, middlewares: Iterable[Middleware] = ()):
        self._middlewares: list[Middleware] = list(middlewares)
        self._routes: list[tuple[str, str, Handler]] = []
        self._children: list[tuple[str, "RouteTable"]] = []

    def use(self, *middlewares: Middleware) -> None:
        self._middlewares.extend(middlewares)

    def with_middleware(self, *middlewares: Middleware) -> "RouteTable":
        """Return an inline group whose routes get the extra middleware."""
        group = RouteTable(middlewares)
        self._children.append(("", group))
        return group

    def route(self, prefix: str, fn=None) -> "RouteTable":
        """Mount a sub-table under ``prefix``, optionally configuring it with ``fn``."""
        sub = RouteTable()
        self._children.append((prefix, sub))
        if fn is not None:
            fn(sub)
        return sub

    def handle(self, method: str, path: str, handler: Handler) -> Handler:
        method = method.upper()
        if method not in METHODS:
            raise ValueError(f"unsupported HTTP method {method!r}")
        self._routes.append((method, path, handler))
        return handler

    def get(self, path: str, handler: Handler) -> Handler:
        return self.handle("GET", path, handler)

    def post(self, path: str, handler: Handler) -> Handler:
        return self.handle("POST", path, handler)

    def put(self, path: str, handler: Handler) -> Handler:
        return self.handle("PUT", path, handler)

    def patch(self, path: str, handler: Handler) -> Handler:
        return self.handle("PATCH", path, handler)

    def delete(self, path: str, handler: Handler) -> Handler:
        return self.handle("DELETE", path, handler)

    def walk(self) -> Iterator[Route]:
        """Yield every route depth-first in registration order."""
        return self._walk("", ())

    def _walk(self, prefix: str, inherited: tuple[Middleware, ...]) -> Iterator[Route]:
        chain = (*inherited, *self._middlewares)
        for method, path, handler in self._routes:
            yield Route(method, _join(prefix, path), handler, chain)
        for sub_prefix, child in self._children:
            yield from child._walk(_join(prefix, sub_prefix), chain)
