"""Pipeline: discovery -> per-file analysis -> path composition -> document."""

import logging
from pathlib import Path

from hono_openapi.discovery import default_entries, discover_files
from hono_openapi.errors import ConventionConflictError, NoFilesMatchedError
from hono_openapi.generator.openapi import DEFAULT_TITLE, DEFAULT_VERSION, routes_to_openapi
from hono_openapi.parser.base import AnalyzerConfig, RouteRecord
from hono_openapi.parser.routes import analyze_source
from hono_openapi.parser.source import load_source
from hono_openapi.routing.autorouter import AutorouterConvention
from hono_openapi.routing.autoroutes import AutoroutesConvention
from hono_openapi.routing.compose import Convention, compose_routes

logger = logging.getLogger(__name__)


def resolve_convention(autoroutes_root: Path | None = None, autorouter_root: Path | None = None) -> Convention | None:
    """Pick the folder convention from the configured roots."""
    if autoroutes_root is not None and autorouter_root is not None:
        raise ConventionConflictError()
    if autoroutes_root is not None:
        return AutoroutesConvention(root=autoroutes_root)
    if autorouter_root is not None:
        return AutorouterConvention(root=autorouter_root)
    return None


def analyze_file(path: Path, convention: Convention | None = None, config: AnalyzerConfig | None = None) -> list[RouteRecord]:
    """Routes registered in one file, with folder prefixes applied."""
    source = load_source(path)
    if source is None:
        return []
    routes = analyze_source(source, config)
    logger.debug("%s: %d route(s)", path, len(routes))
    return compose_routes(routes, path, convention)


def analyze_files(paths: list[Path], convention: Convention | None = None, config: AnalyzerConfig | None = None) -> list[RouteRecord]:
    routes: list[RouteRecord] = []
    for path in paths:
        routes.extend(analyze_file(path, convention, config))
    return routes


def collect_routes(
    entries: list[str] | None = None,
    convention: Convention | None = None,
    config: AnalyzerConfig | None = None,
) -> list[RouteRecord]:
    """Discover the files for ``entries`` and analyze them all."""
    patterns = list(entries) if entries else default_entries(convention)
    files = discover_files(patterns)
    if not files:
        raise NoFilesMatchedError(patterns)
    return analyze_files(files, convention, config)


def analyze_to_openapi(
    entries: list[str] | None = None,
    convention: Convention | None = None,
    config: AnalyzerConfig | None = None,
    title: str = DEFAULT_TITLE,
    version: str = DEFAULT_VERSION,
) -> dict:
    """Full run: the OpenAPI document for every route under ``entries``."""
    routes = collect_routes(entries, convention, config)
    return routes_to_openapi(routes, title=title, version=version)
