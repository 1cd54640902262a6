"""Per-type customization capabilities.

A type declares up front which of the five customizations it provides:
an explicit type/format override, a union of alternate types, property
docs, property attributes and property formats. The customizer chain only
ever queries a ``CapabilitySet``; it never inspects the type itself.
"""

from typing import Literal

from pydantic import BaseModel

Attribute = Literal["readonly", "required"]


class CapabilitySet(BaseModel):
    """Capabilities declared by one type. None means "not provided"."""

    schema_types: list[str] | None = None
    schema_format: str = ""
    one_of_types: list[str] | None = None
    docs: dict[str, str] | None = None
    attributes: dict[str, Attribute] | None = None
    formats: dict[str, str] | None = None


EMPTY = CapabilitySet()


class CapabilityRegistry:
    """Maps types to their declared capabilities."""

    def __init__(self):
        self._caps: dict[type, CapabilitySet] = {}

    def register(
        self,
        tp: type,
        *,
        schema_types: list[str] | None = None,
        schema_format: str = "",
        one_of_types: list[str] | None = None,
        docs: dict[str, str] | None = None,
        attributes: dict[str, str] | None = None,
        formats: dict[str, str] | None = None,
    ) -> None:
        """Declare capabilities for ``tp``.

        Capabilities given here replace earlier declarations of the same kind;
        the others are kept.
        """
        given = {
            name: value
            for name, value in (
                ("schema_types", schema_types),
                ("one_of_types", one_of_types),
                ("docs", docs),
                ("attributes", attributes),
                ("formats", formats),
            )
            if value is not None
        }
        if schema_format:
            given["schema_format"] = schema_format
        validated = CapabilitySet(**given)
        current = self._caps.get(tp, EMPTY)
        self._caps[tp] = current.model_copy(update=validated.model_dump(include=set(given)))

    def declare(self, **capabilities):
        """Class decorator form of ``register``."""

        def decorator(cls):
            self.register(cls, **capabilities)
            return cls

        return decorator

    def lookup(self, tp: type) -> CapabilitySet:
        """Return the capabilities of ``tp`` or of its closest registered base."""
        for klass in getattr(tp, "__mro__", (tp,)):
            caps = self._caps.get(klass)
            if caps is not None:
                return caps
        return EMPTY

    def __contains__(self, tp: type) -> bool:
        return self.lookup(tp) is not EMPTY


default_registry = CapabilityRegistry()
