"""Applies the active folder convention to the routes found in one file."""

import logging
from pathlib import Path

from hono_openapi.parser.base import RouteRecord

from .autorouter import AutorouterConvention, compute_autorouter_path
from .autoroutes import AutoroutesConvention, compute_autoroute_prefix, find_middleware_scopes, is_route_file
from .paths import extract_path_params, join_route_paths

logger = logging.getLogger(__name__)

Convention = AutoroutesConvention | AutorouterConvention


def _with_prefix(route: RouteRecord, prefix: str, **extra) -> RouteRecord:
    path = join_route_paths(prefix, route.path)
    logger.debug("Composed %s -> %s", route.path, path)
    return route.model_copy(update={"path": path, "path_params": extract_path_params(path), **extra})


def compose_routes(routes: list[RouteRecord], file_path: Path, convention: Convention | None) -> list[RouteRecord]:
    """Prefix the routes of ``file_path`` according to its place under the convention root."""
    if convention is None:
        return routes
    if isinstance(convention, AutoroutesConvention):
        if not is_route_file(file_path):
            return routes
        prefix = compute_autoroute_prefix(file_path, convention.root)
        if prefix is None:
            return routes
        scopes = find_middleware_scopes(file_path, convention.root)
        return [_with_prefix(r, prefix, middleware_scopes=scopes) for r in routes]
    base = compute_autorouter_path(convention.root, file_path)
    if base is None:
        return routes
    return [_with_prefix(r, base) for r in routes]
