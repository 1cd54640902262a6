"""Doc-comment extraction from record class sources.

Comments directly above an annotated class field document it. Comment
lines of the form ``#openapi:<directive>`` are directives rather than
documentation:

- ``gen`` above a class opts it into extraction (unless all classes are scanned)
- ``readonly`` and ``required`` set the field's attribute
- ``format=<value>`` sets the field's format

Anything after whitespace in a directive is ignored, as are unknown directives.
"""

import ast
import logging
import re
from pathlib import Path

from pydantic import BaseModel

from route_openapi.errors import DirectiveError, SourcePackageError

logger = logging.getLogger(__name__)

GENERATED_FILENAME = "zz_generated_docs.py"

DIRECTIVE_GEN = "gen"
DIRECTIVE_READONLY = "readonly"
DIRECTIVE_REQUIRED = "required"
DIRECTIVE_FORMAT = "format"

_DIRECTIVE = re.compile(r"^# ?openapi:(\S*)")


class ClassInfo(BaseModel):
    """Documentation gathered for one class."""

    name: str
    module: str
    docs: dict[str, str] = {}
    attrs: dict[str, str] = {}
    formats: dict[str, str] = {}

    def empty(self) -> bool:
        return not self.docs and not self.attrs and not self.formats


class PackageInfo(BaseModel):
    path: Path
    is_package: bool  # the directory has an __init__.py
    classes: list[ClassInfo] = []


def directives(lines: list[str]) -> list[str]:
    found = []
    for line in lines:
        match = _DIRECTIVE.match(line.strip())
        if match and match.group(1):
            found.append(match.group(1))
    return found


def doc_text(lines: list[str]) -> str:
    """Join the non-directive comment lines into one line of text."""
    parts = []
    for line in lines:
        line = line.strip()
        if _DIRECTIVE.match(line):
            continue
        text = line.lstrip("#").strip()
        if text:
            parts.append(text)
    return " ".join(parts)


def comment_block(source_lines: list[str], lineno: int) -> list[str]:
    """Return the comment lines directly above the 1-based line ``lineno``."""
    block = []
    idx = lineno - 2
    while idx >= 0 and source_lines[idx].strip().startswith("#"):
        block.append(source_lines[idx])
        idx -= 1
    block.reverse()
    return block


def _is_class_var(annotation: ast.expr) -> bool:
    if isinstance(annotation, ast.Subscript):
        annotation = annotation.value
    if isinstance(annotation, ast.Attribute):
        return annotation.attr == "ClassVar"
    return isinstance(annotation, ast.Name) and annotation.id == "ClassVar"


def _string_constant(node: ast.expr) -> str | None:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    return None


def field_key(stmt: ast.AnnAssign, tag: str) -> str:
    """Return the property key of a field.

    An explicit ``serialization_alias``, then ``alias``, or a
    ``metadata={tag: ...}`` entry in the field's default call wins over the
    attribute name.
    """
    name = stmt.target.id
    if not isinstance(stmt.value, ast.Call):
        return name
    aliases = {
        keyword.arg: _string_constant(keyword.value)
        for keyword in stmt.value.keywords
        if keyword.arg in ("serialization_alias", "alias")
    }
    alias = aliases.get("serialization_alias") or aliases.get("alias")
    if alias:
        return alias
    for keyword in stmt.value.keywords:
        if keyword.arg == "metadata" and isinstance(keyword.value, ast.Dict):
            for key, value in zip(keyword.value.keys, keyword.value.values):
                if key is not None and _string_constant(key) == tag:
                    alias = _string_constant(value)
                    if alias:
                        return alias
    return name


class DocExtractor:
    """Gathers field documentation from the Python modules of one directory."""

    def __init__(self, tag: str = "json", all_classes: bool = False):
        self.tag = tag
        self.all_classes = all_classes

    def gather(self, path: Path) -> PackageInfo:
        sources = sorted(
            p for p in path.glob("*.py")
            if p.name != GENERATED_FILENAME and not p.name.startswith("test_") and not p.stem.endswith("_test")
        )
        if not sources:
            raise SourcePackageError(f"no package found in {path}")

        info = PackageInfo(path=path, is_package=(path / "__init__.py").exists())
        seen: dict[str, str] = {}
        for source in sources:
            for cls in self._gather_module(source):
                if cls.name in seen:
                    raise SourcePackageError(
                        f"class {cls.name!r} is defined in both {seen[cls.name]}.py and {cls.module}.py"
                    )
                seen[cls.name] = cls.module
                info.classes.append(cls)

        info.classes.sort(key=lambda c: c.name)
        return info

    def _gather_module(self, source: Path) -> list[ClassInfo]:
        text = source.read_text(encoding="utf-8")
        try:
            tree = ast.parse(text, filename=str(source))
        except SyntaxError as e:
            raise SourcePackageError(f"parsing source code: {e}") from e

        lines = text.splitlines()
        found = []
        for node in tree.body:
            if not isinstance(node, ast.ClassDef):
                continue
            first_line = node.decorator_list[0].lineno if node.decorator_list else node.lineno
            if not self.all_classes and DIRECTIVE_GEN not in directives(comment_block(lines, first_line)):
                continue

            cls = self._gather_class(node, source.stem, lines)
            if cls.empty():
                continue
            logger.debug("documented class %s in %s", cls.name, source.name)
            found.append(cls)
        return found

    def _gather_class(self, node: ast.ClassDef, module: str, lines: list[str]) -> ClassInfo:
        info = ClassInfo(name=node.name, module=module)
        for stmt in node.body:
            if not isinstance(stmt, ast.AnnAssign) or not isinstance(stmt.target, ast.Name):
                continue
            if stmt.target.id.startswith("_") or _is_class_var(stmt.annotation):
                continue

            block = comment_block(lines, stmt.lineno)
            if not block:
                continue

            key = field_key(stmt, self.tag)
            if docs := doc_text(block):
                info.docs[key] = docs

            for directive in directives(block):
                if directive == DIRECTIVE_READONLY:
                    info.attrs[key] = "readonly"
                elif directive == DIRECTIVE_REQUIRED and not info.attrs.get(key):
                    info.attrs[key] = "required"
                elif directive.startswith(DIRECTIVE_FORMAT):
                    _, sep, value = directive.partition("=")
                    if not sep:
                        raise DirectiveError(
                            f"format directive should be in format openapi:format=<format>, got {directive}"
                        )
                    info.formats[key] = value
        return info
