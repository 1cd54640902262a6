"""Operation descriptors and the fluent builder that attaches them to routes.

An operation is collected from the middleware chain of a route: every
middleware built with ``OpBuilder.build`` answers the ``OperationHandler``
sentinel with its operation, and the walker merges all answers left to right.
Handlers that cannot carry middleware register their operation with an
``OperationRegistry`` through ``OpBuilder.build_handler`` instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from route_openapi.registry import OperationRegistry

Handler = Callable[..., Any]
Middleware = Callable[[Handler], Handler]

IN_PATH = "path"
IN_QUERY = "query"
IN_HEADER = "header"

SECURITY_TYPE_BASIC = "basic"
SECURITY_TYPE_BEARER = "bearer"
SECURITY_TYPE_API_KEY = "apiKey"


class Parameter(BaseModel):
    """A path, query or header parameter.

    Exactly one of ``type_name`` (an explicit primitive type) and
    ``data_type`` (a sample whose type is reflected) is expected to be set.
    """

    model_config = ConfigDict(frozen=True)

    location: str  # path / query / header
    name: str
    description: str = ""
    required: bool = False
    type_name: str = ""
    data_type: Any = None


def path_parameter(name: str, description: str) -> Parameter:
    """Return a required path parameter typed as a string."""
    return Parameter(location=IN_PATH, name=name, description=description, required=True, data_type="")


def query_parameter(name: str, description: str, typ: Any) -> Parameter:
    """Return a query parameter whose schema is reflected from ``typ``."""
    return Parameter(location=IN_QUERY, name=name, description=description, data_type=typ)


def query_parameter_with_type(name: str, description: str, typ: str) -> Parameter:
    """Return a query parameter with the given primitive type."""
    return Parameter(location=IN_QUERY, name=name, description=description, type_name=typ)


def header_parameter(name: str, description: str) -> Parameter:
    return Parameter(location=IN_HEADER, name=name, description=description, type_name="string")


class Response(BaseModel):
    """A documented response. ``writes`` of None means no content."""

    model_config = ConfigDict(frozen=True)

    code: int
    description: str
    writes: Any = None
    headers: list[str] = []
    media_types: list[str] = []  # overrides the operation's produced types


ResponseOption = Callable[[Response], Response]


def with_response_header(name: str) -> ResponseOption:
    """Declare a header on the response."""

    def apply(resp: Response) -> Response:
        return resp.model_copy(update={"headers": [*resp.headers, name]})

    return apply


def with_media_types(*media_types: str) -> ResponseOption:
    """Set the media types of a single response."""

    def apply(resp: Response) -> Response:
        return resp.model_copy(update={"media_types": list(media_types)})

    return apply


class Security(BaseModel):
    """A security scheme, discriminated by ``type``.

    ``basic`` takes no extra fields, ``bearer`` an optional bearer format and
    ``apiKey`` a key name plus its location (header, cookie or query).
    """

    model_config = ConfigDict(frozen=True)

    type: str
    bearer_format: str = ""
    api_key_name: str = ""
    api_key_in: str = ""


SECURITY_BASIC = Security(type=SECURITY_TYPE_BASIC)
SECURITY_BEARER = Security(type=SECURITY_TYPE_BEARER)


class Operation(BaseModel):
    """Describes one API endpoint."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    summary: str = ""
    tags: list[str] = []
    params: list[Parameter] = []
    consumes: list[str] = []
    reads: Any = None
    produces: list[str] = []
    returns: list[Response] = []
    security: dict[str, Security] = {}

    def merge(self, other: Operation) -> Operation:
        """Return this operation merged with ``other``.

        Non-empty scalars of ``other`` win, lists are appended in order and
        a non-None ``reads`` replaces the current one.
        """
        update: dict[str, Any] = {}
        if other.id:
            update["id"] = other.id
        if other.summary:
            update["summary"] = other.summary
        for name in ("tags", "params", "consumes", "produces", "returns"):
            extra = getattr(other, name)
            if extra:
                update[name] = [*getattr(self, name), *extra]
        if other.reads is not None:
            update["reads"] = other.reads
        if other.security:
            update["security"] = {**self.security, **other.security}
        return self.model_copy(update=update)


class OperationHandler:
    """Sentinel handler that middleware built by ``OpBuilder`` recognizes.

    Calling a middleware with an instance returns a new instance carrying
    the middleware's operation.
    """

    def __init__(self, op: Operation | None = None):
        self.op = op

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        return None


class OpBuilder:
    """Builds an operation through chained setter calls."""

    def __init__(self):
        self._op = Operation()

    def _set(self, **update: Any) -> OpBuilder:
        self._op = self._op.model_copy(update=update)
        return self

    def id(self, op_id: str) -> OpBuilder:
        return self._set(id=op_id)

    def doc(self, summary: str) -> OpBuilder:
        return self._set(summary=summary)

    def tag(self, tag: str) -> OpBuilder:
        return self._set(tags=[*self._op.tags, tag])

    def param(self, param: Parameter) -> OpBuilder:
        return self._set(params=[*self._op.params, param])

    def params(self, *params: Parameter) -> OpBuilder:
        return self._set(params=[*self._op.params, *params])

    def consumes(self, *media_types: str) -> OpBuilder:
        """Set the media types the request body is read in."""
        return self._set(consumes=list(media_types))

    def reads(self, obj: Any) -> OpBuilder:
        """Set the request body sample. Only its type is used."""
        return self._set(reads=obj)

    def produces(self, *media_types: str) -> OpBuilder:
        """Set the media types responses are written in."""
        return self._set(produces=list(media_types))

    def returns(self, code: int, description: str, obj: Any, *opts: ResponseOption) -> OpBuilder:
        """Append a response. ``obj`` of None documents a response without content."""
        resp = Response(code=code, description=description, writes=obj)
        for opt in opts:
            resp = opt(resp)
        return self._set(returns=[*self._op.returns, resp])

    def requires_auth(self, name: str, security: Security) -> OpBuilder:
        """Require the named security scheme for the operation."""
        return self._set(security={**self._op.security, name: security})

    @property
    def operation(self) -> Operation:
        return self._op

    def build(self) -> Middleware:
        """Build a middleware that answers the operation sentinel.

        For any other handler the middleware returns the handler untouched,
        effectively removing itself from the stack.
        """
        op = self._op

        def middleware(next_handler: Handler) -> Handler:
            if isinstance(next_handler, OperationHandler):
                return OperationHandler(op)
            return next_handler

        return middleware

    def build_handler(self, registry: OperationRegistry) -> Callable[[Handler], Handler]:
        """Build a decorator that registers the operation against the handler it wraps."""
        op = self._op

        def decorator(handler: Handler) -> Handler:
            registry.register(handler, op)
            return handler

        return decorator


def op() -> OpBuilder:
    """Return a new operation builder."""
    return OpBuilder()
