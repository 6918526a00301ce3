"""File discovery: expands glob patterns into the list of source files to analyze.

Patterns are matched with gitignore-style rules (``**`` spans directories);
``{a,b}`` alternatives are expanded first since pathspec has no braces.
"""

import os
import re
from pathlib import Path

import pathspec

from hono_openapi.routing.autorouter import AutorouterConvention
from hono_openapi.routing.autoroutes import AutoroutesConvention

DEFAULT_ENTRY = "src/**/*.ts"
DEFAULT_IGNORES = ["**/*.d.ts", "**/node_modules/", ".*"]

_BRACE_RE = re.compile(r"\{([^{}]*,[^{}]*)\}")
_GLOB_CHARS = set("*?[")


def expand_braces(pattern: str) -> list[str]:
    """``src/*.{ts,tsx}`` -> ``["src/*.ts", "src/*.tsx"]``."""
    match = _BRACE_RE.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(head + option + tail))
    return expanded


def _split_base(pattern: str) -> tuple[Path, str]:
    """Split a pattern into the directory to walk and the glob below it."""
    parts = Path(pattern).parts
    for i, part in enumerate(parts):
        if _GLOB_CHARS & set(part):
            return Path(*parts[:i]) if i else Path("."), "/".join(parts[i:])
    return Path(pattern), ""


def _walk(base: Path, include: pathspec.PathSpec, exclude: pathspec.PathSpec) -> list[Path]:
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(base):
        rel_dir = Path(dirpath).relative_to(base).as_posix()
        prefix = "" if rel_dir == "." else f"{rel_dir}/"
        dirnames[:] = [d for d in dirnames if not exclude.match_file(f"{prefix}{d}/")]
        for fname in filenames:
            rel_path = f"{prefix}{fname}"
            if include.match_file(rel_path) and not exclude.match_file(rel_path):
                found.append(Path(dirpath) / fname)
    return found


def discover_files(patterns: list[str], absolute: bool = True, ignore: list[str] | None = None) -> list[Path]:
    """Files matched by any of the patterns, sorted and without duplicates.

    ``ignore`` adds gitignore-style lines to ``DEFAULT_IGNORES``.
    """
    exclude = pathspec.PathSpec.from_lines("gitignore", DEFAULT_IGNORES + list(ignore or []))
    found: set[Path] = set()
    for pattern in patterns:
        for expanded in expand_braces(pattern):
            base, rest = _split_base(expanded)
            if not rest:
                candidates = [base] if base.is_file() and not exclude.match_file(base.name) else []
            else:
                # anchored, so "*.ts" stays in the base directory like a shell glob
                include = pathspec.PathSpec.from_lines("gitignore", [f"/{rest}"])
                candidates = _walk(base, include, exclude)
            for path in candidates:
                found.add(path.resolve() if absolute else path)
    return sorted(found)


def default_entries(convention: AutoroutesConvention | AutorouterConvention | None) -> list[str]:
    """Default entry pattern for the active folder convention."""
    if isinstance(convention, AutoroutesConvention):
        return [f"{convention.root.as_posix()}/**/route.{{ts,tsx}}"]
    if isinstance(convention, AutorouterConvention):
        return [f"{convention.root.as_posix()}/**/*.{{ts,tsx}}"]
    return [DEFAULT_ENTRY]
