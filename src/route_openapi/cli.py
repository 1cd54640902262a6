"""CLI entry point for route-openapi."""

import importlib
import logging
from pathlib import Path

import click

from route_openapi.config import SpecConfig
from route_openapi.docgen.extract import GENERATED_FILENAME
from route_openapi.docgen.render import write_docs
from route_openapi.errors import RouteOpenAPIError
from route_openapi.registry import OperationRegistry
from route_openapi.spec.generator import build_spec
from route_openapi.spec.model import Document


def _load_target(target: str):
    """Import ``module:attribute`` and return the routes object it names."""
    module_name, sep, attr = target.partition(":")
    if not sep or not attr:
        raise click.BadParameter("expected MODULE:ATTRIBUTE", param_hint="TARGET")
    module = importlib.import_module(module_name)
    obj = getattr(module, attr)
    if not hasattr(obj, "walk") and callable(obj):
        obj = obj()
    return obj


def _load_registry(ref: str | None) -> OperationRegistry | None:
    if ref is None:
        return None
    module_name, sep, attr = ref.partition(":")
    if not sep or not attr:
        raise click.BadParameter("expected MODULE:ATTRIBUTE", param_hint="--registry")
    registry = getattr(importlib.import_module(module_name), attr)
    if not isinstance(registry, OperationRegistry):
        raise click.BadParameter(f"{ref} is not an OperationRegistry", param_hint="--registry")
    return registry


def _detect_format(output: Path, fmt: str) -> str:
    if fmt != "auto":
        return fmt
    if output.suffix.lower() in (".yaml", ".yml"):
        return "yaml"
    return "json"


def _render(doc: Document, fmt: str) -> str:
    if fmt == "yaml":
        return doc.to_yaml()
    return doc.to_json() + "\n"


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """route-openapi: build OpenAPI documents from route tables."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("--path", "path", default=None, type=click.Path(exists=True, file_okay=False, path_type=Path), help="Directory to parse for documentation. Defaults to the current directory.")
@click.option("--tag", default="json", help="Field metadata key that overrides the documentation key.")
@click.option("--all", "all_classes", is_flag=True, help="Parse all classes.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress generation output.")
def gen_docs(path: Path | None, tag: str, all_classes: bool, quiet: bool):
    """Generate the capability registration module for documented classes."""
    path = path or Path.cwd()
    if not quiet:
        click.echo(f"Generating docs for {path}")

    try:
        written = write_docs(path, tag=tag, all_classes=all_classes)
    except (RouteOpenAPIError, OSError) as e:
        click.echo(f"Could not generate documentation file {str(path / GENERATED_FILENAME)!r}: {e}", err=True)
        raise SystemExit(1)

    if written is not None and not quiet:
        click.echo(f"Docs saved to {written}")


@main.command("build-spec")
@click.argument("target")
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the document.")
@click.option("--strip-prefix", "strip_prefixes", multiple=True, envvar="ROUTE_OPENAPI_STRIP_PREFIXES", help="Path prefix to strip from routes. Repeatable.")
@click.option("--pkg-segments", default=0, type=click.IntRange(min=0), envvar="ROUTE_OPENAPI_PKG_SEGMENTS", help="Module path segments used to qualify schema names.")
@click.option("--title", default="", help="Document title.")
@click.option("--version", "doc_version", default="", help="Document version.")
@click.option("--registry", "registry_spec", default=None, help="MODULE:ATTRIBUTE of the OperationRegistry used by handlers.")
@click.option("--import", "imports", multiple=True, help="Extra module to import first, e.g. generated docs. Repeatable.")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "json", "yaml"]), help="Output format.")
def build(target: str, output: Path, strip_prefixes: tuple[str, ...], pkg_segments: int, title: str, doc_version: str, registry_spec: str | None, imports: tuple[str, ...], fmt: str):
    """Build an OpenAPI document from MODULE:ATTRIBUTE routes."""
    for name in imports:
        importlib.import_module(name)
    routes = _load_target(target)
    registry = _load_registry(registry_spec)

    config = SpecConfig(
        strip_prefixes=list(strip_prefixes),
        obj_pkg_segments=pkg_segments,
        title=title,
        version=doc_version,
    )
    try:
        doc = build_spec(routes, config, registry=registry)
    except RouteOpenAPIError as e:
        click.echo(f"Could not build document: {e}", err=True)
        raise SystemExit(1)

    fmt = _detect_format(output, fmt)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(_render(doc, fmt), encoding="utf-8")
    click.echo(f"Document saved to {output}")
