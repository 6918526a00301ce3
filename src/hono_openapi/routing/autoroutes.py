"""Grouped routes convention: ``<root>/<dirs>/route.ts`` serves ``/<dirs>``.

A ``middleware.ts`` file in the route's directory or any ancestor up to the
root marks a middleware scope. Scopes are reported for documentation only.
"""

from pathlib import Path

from pydantic import BaseModel

ROUTE_FILE_STEM = "route"
MIDDLEWARE_FILE_STEM = "middleware"
SOURCE_SUFFIXES = (".ts", ".tsx", ".js", ".jsx")


class AutoroutesConvention(BaseModel):
    """Convention A: only ``route.*`` files are prefixed."""

    root: Path


def _relative_dir(directory: Path, root: Path) -> list[str] | None:
    try:
        rel = directory.resolve().relative_to(root.resolve())
    except ValueError:
        return None
    return [part for part in rel.parts if part not in ("", ".")]


def _prefix(parts: list[str]) -> str:
    return "/" + "/".join(parts) if parts else "/"


def is_route_file(file_path: Path) -> bool:
    return file_path.stem == ROUTE_FILE_STEM and file_path.suffix in SOURCE_SUFFIXES


def compute_autoroute_prefix(file_path: Path, root: Path) -> str | None:
    """Path prefix for a route file, or None if it lies outside the root."""
    parts = _relative_dir(file_path.parent, root)
    if parts is None:
        return None
    return _prefix(parts)


def has_middleware(directory: Path) -> bool:
    return any((directory / f"{MIDDLEWARE_FILE_STEM}{suffix}").is_file() for suffix in SOURCE_SUFFIXES)


def find_middleware_scopes(file_path: Path, root: Path) -> list[str]:
    """Prefixes of the directories, from the root down, that hold a middleware file."""
    stop = root.resolve()
    current = file_path.parent.resolve()
    scopes: list[str] = []
    while True:
        parts = _relative_dir(current, stop)
        if parts is None:
            break
        if has_middleware(current):
            scopes.append(_prefix(parts))
        if current == stop or current.parent == current:
            break
        current = current.parent
    scopes.reverse()
    return scopes
