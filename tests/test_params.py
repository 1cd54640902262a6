import dataclasses
import datetime
import decimal
import uuid
from typing import Any, Optional

from pydantic import BaseModel, Field

from route_openapi.capabilities import CapabilityRegistry
from route_openapi.params import json_type, parse_params


class Inner(BaseModel):
    value: int


class Query(BaseModel):
    page_size: int = Field(default=10, alias="pageSize")
    token: Optional[str] = None
    verbose: bool = False
    ratio: float = 1.0
    labels: dict[str, str] = {}
    inner: Optional[Inner] = None
    extra: Any = None


@dataclasses.dataclass
class Form:
    name: str = dataclasses.field(default="", metadata={"form": "full_name"})
    skipped: str = dataclasses.field(default="", metadata={"form": "-"})
    count: int = 0


class TestParseParams:
    def test_pydantic_fields(self):
        params = parse_params(Query)
        assert [(p.name, p.type_name) for p in params] == [
            ("pageSize", "integer"),
            ("token", "string"),
            ("verbose", "boolean"),
            ("ratio", "number"),
            ("labels", "string"),
        ]
        assert all(p.location == "query" and not p.required for p in params)

    def test_dataclass_uses_tag(self):
        params = parse_params(Form(), "form")
        assert [p.name for p in params] == ["full_name", "count"]

    def test_descriptions_from_docs(self):
        capabilities = CapabilityRegistry()
        capabilities.register(Form, docs={"count": "how many"})
        params = parse_params(Form, "form", capabilities=capabilities)
        assert params[1].description == "how many"
        assert params[0].description == ""

    def test_non_record_yields_nothing(self):
        assert parse_params(123) == []


class TestJsonType:
    def test_primitives(self):
        assert json_type(bool) == "boolean"
        assert json_type(int) == "integer"
        assert json_type(str) == "string"

    def test_containers(self):
        assert json_type(list[int]) == "array"
        assert json_type(dict[str, str]) == "string"

    def test_formatted_primitives_use_base_type(self):
        assert json_type(datetime.datetime) == "string"
        assert json_type(uuid.UUID) == "string"
        assert json_type(decimal.Decimal) == "number"

    def test_unknown_class_is_string(self):
        assert json_type(Inner) == "string"
