"""Query parameters derived from the fields of a record type."""

import typing
from typing import Any

from route_openapi.capabilities import CapabilityRegistry, default_registry
from route_openapi.op import Parameter, query_parameter_with_type
from route_openapi.spec.typemap import is_record, primitive, record_fields, type_of, unwrap_optional


def parse_params(obj: Any, tag: str = "json", capabilities: CapabilityRegistry = default_registry) -> list[Parameter]:
    """Return one query parameter per scalar field of ``obj``'s record type.

    Fields holding records or ``Any`` are skipped, as are fields whose key
    is empty. Descriptions come from the type's declared docs.
    """
    tp = unwrap_optional(type_of(obj))
    if not is_record(tp):
        return []

    docs = capabilities.lookup(tp).docs or {}
    params = []
    for field in record_fields(tp, tag):
        annotation = unwrap_optional(field.annotation)
        if annotation is Any or is_record(annotation) or not field.key:
            continue
        params.append(query_parameter_with_type(field.key, docs.get(field.key, ""), json_type(annotation)))
    return params


def json_type(annotation: Any) -> str:
    """Map a field annotation to an OpenAPI primitive type name.

    Annotations without a primitive counterpart are documented as strings.
    """
    origin = typing.get_origin(annotation)
    if isinstance(origin, type) and issubclass(origin, dict):
        return "string"
    if isinstance(origin, type) and issubclass(origin, (list, tuple, set, frozenset)):
        return "array"
    if origin is None and isinstance(annotation, type):
        type_format = primitive(annotation)
        if type_format is not None:
            return type_format[0]
    return "string"
