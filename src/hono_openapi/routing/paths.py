"""Path helpers shared by both folder conventions and the assembler."""

import re

_PARAM_RE = re.compile(r":([A-Za-z0-9_]+)")
# ":id" optionally followed by a Hono regex constraint such as "{[0-9]+}"
_OPENAPI_PARAM_RE = re.compile(r":([A-Za-z0-9_]+)(\{[^/]*\})?")


def extract_path_params(path: str) -> list[str]:
    """Names of the ``:name`` segments of a route path, in order."""
    return _PARAM_RE.findall(path)


def to_openapi_path(path: str) -> str:
    """Convert ``/users/:id`` to ``/users/{id}``."""
    return _OPENAPI_PARAM_RE.sub(r"{\1}", path)


def _normalize_local(local: str) -> str:
    if not local:
        return "/"
    return local if local.startswith("/") else f"/{local}"


def join_route_paths(prefix: str | None, local: str) -> str:
    """Join a folder prefix and a locally registered path with exactly one slash."""
    if not prefix or prefix == "/":
        return _normalize_local(local)
    head = prefix.rstrip("/")
    tail = local.lstrip("/")
    if not tail:
        return head
    return f"{head}/{tail}"
