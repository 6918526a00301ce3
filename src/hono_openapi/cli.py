"""CLI entry point for hono-openapi."""

import logging
from pathlib import Path

import click

from hono_openapi.errors import HonoOpenApiError
from hono_openapi.generator.openapi import DEFAULT_TITLE, DEFAULT_VERSION, dump_document, routes_to_openapi
from hono_openapi.parser.base import AnalyzerConfig, RouteRecord
from hono_openapi.pipeline import collect_routes, resolve_convention


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")


def _collect(entries: tuple[str, ...], root: Path | None, autorouter: Path | None, strict_receivers: bool) -> list[RouteRecord]:
    config = AnalyzerConfig(receiver_policy="router" if strict_receivers else "any")
    try:
        convention = resolve_convention(autoroutes_root=root, autorouter_root=autorouter)
        return collect_routes(list(entries) or None, convention, config)
    except HonoOpenApiError as e:
        raise click.ClickException(str(e)) from e


def _infer_format(out: Path, fmt: str | None) -> str:
    if fmt:
        return fmt
    return "yaml" if out.suffix.lower() in (".yaml", ".yml") else "json"


entries_option = click.option("--entries", multiple=True, help="Glob pattern of files to analyze (repeatable).")
root_option = click.option("--root", "--autoroutes", "root", default=None, type=click.Path(file_okay=False, path_type=Path), help="Root of a route.ts folder tree.")
autorouter_option = click.option("--autorouter", default=None, type=click.Path(file_okay=False, path_type=Path), help="Root of a file-per-route folder tree.")
strict_option = click.option("--strict-receivers", is_flag=True, help="Only accept receivers typed as a Hono router.")
verbose_option = click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")


@click.group()
def main():
    """hono-openapi: generate an OpenAPI document from Hono route sources."""
    pass


@main.command()
@entries_option
@root_option
@autorouter_option
@click.option("-o", "--out", default="openapi.json", type=click.Path(dir_okay=False, path_type=Path), help="Output file.")
@click.option("--format", "fmt", default=None, type=click.Choice(["json", "yaml"]), help="Output format (default: from the output suffix).")
@click.option("--title", default=DEFAULT_TITLE, help="Document title.")
@click.option("--api-version", default=DEFAULT_VERSION, help="Document version.")
@strict_option
@verbose_option
def generate(
    entries: tuple[str, ...],
    root: Path | None,
    autorouter: Path | None,
    out: Path,
    fmt: str | None,
    title: str,
    api_version: str,
    strict_receivers: bool,
    verbose: bool,
):
    """Analyze source files and write the OpenAPI document."""
    _setup_logging(verbose)
    routes = _collect(entries, root, autorouter, strict_receivers)
    click.echo(f"Found {len(routes)} routes.")

    document = routes_to_openapi(routes, title=title, version=api_version)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(dump_document(document, _infer_format(out, fmt)), encoding="utf-8")
    click.echo(f"OpenAPI document saved to {out}")


@main.command()
@entries_option
@root_option
@autorouter_option
@strict_option
@verbose_option
def routes(entries: tuple[str, ...], root: Path | None, autorouter: Path | None, strict_receivers: bool, verbose: bool):
    """List the routes found in the source files."""
    _setup_logging(verbose)
    found = _collect(entries, root, autorouter, strict_receivers)
    for route in found:
        statuses = ", ".join(str(r.status or 200) for r in route.responses) or "-"
        click.echo(f"{route.method.upper():7} {route.path}  [{statuses}]")
    click.echo(f"{len(found)} routes.")
