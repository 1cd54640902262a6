"""Exception hierarchy for route-openapi.

Library code raises these; only the CLI turns them into messages and exit codes.
"""


class RouteOpenAPIError(Exception):
    """Base class for all route-openapi errors."""


class SchemaGenerationError(RouteOpenAPIError):
    """A schema could not be synthesized for a referenced type."""


class UnsupportedTypeError(SchemaGenerationError):
    """The type mapper has no schema for the given type."""


class TypeOverrideError(SchemaGenerationError):
    """A type opted into an explicit type override but declared no types."""


class SecuritySchemeError(RouteOpenAPIError):
    """A security descriptor carries an unrecognized type."""


class OperationError(RouteOpenAPIError):
    """Generating one part of an operation failed.

    Carries the HTTP method and path of the offending route.
    """

    def __init__(self, part: str, method: str, path: str, cause: Exception):
        self.part = part
        self.method = method
        self.path = path
        super().__init__(f"generating {part} for {method} {path!r}: {cause}")


class DirectiveError(RouteOpenAPIError):
    """A doc-comment directive is malformed."""


class SourcePackageError(RouteOpenAPIError):
    """The scanned directory holds no usable Python source."""
