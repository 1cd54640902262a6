"""Renders gathered documentation as a capability registration module."""

import json
import logging
from itertools import groupby
from pathlib import Path

from route_openapi.docgen.extract import GENERATED_FILENAME, ClassInfo, DocExtractor, PackageInfo

logger = logging.getLogger(__name__)

HEADER = "# Code generated by route-openapi gen-docs. DO NOT EDIT.\n"


def render_module(info: PackageInfo) -> str:
    """Render a module that registers every class' docs, attributes and formats."""
    lines = [HEADER, "from route_openapi.capabilities import CapabilityRegistry, default_registry", ""]

    prefix = "." if info.is_package else ""
    by_module = sorted(info.classes, key=lambda c: c.module)
    for module, classes in groupby(by_module, key=lambda c: c.module):
        names = ", ".join(sorted(c.name for c in classes))
        lines.append(f"from {prefix}{module} import {names}")

    lines.extend(["", "", "def register_docs(registry: CapabilityRegistry = default_registry) -> None:"])
    for cls in info.classes:
        lines.extend(_render_registration(cls))
    lines.extend(["", "", "register_docs()", ""])
    return "\n".join(lines)


def _render_registration(cls: ClassInfo) -> list[str]:
    lines = ["    registry.register(", f"        {cls.name},"]
    for keyword, values in (("docs", cls.docs), ("attributes", cls.attrs), ("formats", cls.formats)):
        if not values:
            continue
        lines.append(f"        {keyword}={{")
        for key in sorted(values):
            lines.append(f"            {json.dumps(key)}: {json.dumps(values[key])},")
        lines.append("        },")
    lines.append("    )")
    return lines


def generate(path: Path, tag: str = "json", all_classes: bool = False) -> str | None:
    """Return the generated module for ``path``, or None when nothing is documented."""
    info = DocExtractor(tag=tag, all_classes=all_classes).gather(path)
    if not info.classes:
        return None
    return render_module(info)


def write_docs(path: Path, tag: str = "json", all_classes: bool = False) -> Path | None:
    """Regenerate the docs module in ``path``; returns the written file, if any."""
    target = path / GENERATED_FILENAME
    target.unlink(missing_ok=True)

    content = generate(path, tag=tag, all_classes=all_classes)
    if content is None:
        return None

    target.write_text(content, encoding="utf-8")
    logger.info("wrote %s", target)
    return target
