"""Folder router convention: every file's location under the root is its path.

``blog/[id]/index.ts`` serves ``/blog/:id``; ``blog/[id]/get.ts`` too (method
and index file names add no segment); ``docs/[...slug].ts`` serves
``/docs/:slug``.
"""

from pathlib import Path

from pydantic import BaseModel

from hono_openapi.parser.base import HTTP_METHODS

INDEX_STEM = "index"


class AutorouterConvention(BaseModel):
    """Convention B: all files under the root are prefixed."""

    root: Path


def is_method_file(stem: str) -> str | None:
    """The HTTP method a file is named after, if any."""
    lower = stem.lower()
    return lower if lower in HTTP_METHODS else None


def convert_segment(segment: str) -> str:
    """``[id]`` -> ``:id``, ``[...slug]`` -> ``:slug``, ``[[...slug]]`` -> ``:slug``."""
    if not (segment.startswith("[") and segment.endswith("]")):
        return segment
    name = segment[1:-1]
    if name.startswith("[") and name.endswith("]"):
        name = name[1:-1]
    if name.startswith("..."):
        name = name[3:]
    return f":{name}"


def compute_autorouter_path(root: Path, file_path: Path) -> str | None:
    """Base path for a file, or None if it lies outside the root."""
    try:
        rel = file_path.resolve().relative_to(root.resolve())
    except ValueError:
        return None
    segments = [part for part in rel.parent.parts if part not in ("", ".")]
    stem = rel.stem
    if not is_method_file(stem) and stem != INDEX_STEM:
        segments.append(stem)
    converted = [convert_segment(s) for s in segments]
    return "/" + "/".join(s for s in converted if s)
