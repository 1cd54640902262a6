"""Build configuration for OpenAPI document generation."""

from pydantic import BaseModel, Field


class SpecConfig(BaseModel):
    """Configures how a document is built from a route table."""

    strip_prefixes: list[str] = []  # first matching prefix is removed from each path
    obj_pkg_segments: int = Field(default=0, ge=0)  # trailing module segments in schema names
    openapi_version: str = "3.0.0"
    title: str = ""
    version: str = ""
