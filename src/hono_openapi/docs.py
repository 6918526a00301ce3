"""Documentation mount point: serves the document and a Swagger UI page.

The document comes from a dict, from a (sync or async) callable returning one,
or is generated from ``entries`` on first request.
"""

import asyncio
import html
import inspect
from collections.abc import Awaitable, Callable
from pathlib import Path

from fastapi import APIRouter, FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, JSONResponse

from hono_openapi.generator.openapi import DEFAULT_TITLE
from hono_openapi.pipeline import analyze_to_openapi, resolve_convention

DocumentSource = dict | Callable[[], dict | Awaitable[dict]]

SWAGGER_UI_VERSION = "5"


def render_swagger_ui(title: str, json_url: str) -> str:
    title = html.escape(title)
    json_url = html.escape(json_url, quote=True)
    return f"""<!doctype html>
<html>
  <head>
    <meta charset="utf-8" />
    <title>{title}</title>
    <link rel="stylesheet" href="https://unpkg.com/swagger-ui-dist@{SWAGGER_UI_VERSION}/swagger-ui.css" />
  </head>
  <body>
    <div id="swagger-ui"></div>
    <script src="https://unpkg.com/swagger-ui-dist@{SWAGGER_UI_VERSION}/swagger-ui-bundle.js"></script>
    <script>
      window.ui = SwaggerUIBundle({{ url: "{json_url}", dom_id: "#swagger-ui" }});
    </script>
  </body>
</html>
"""


def build_docs_router(
    document: DocumentSource | None = None,
    entries: list[str] | None = None,
    root: Path | None = None,
    docs_path: str = "/docs",
    json_path: str = "/openapi.json",
    title: str = "API Docs",
    document_title: str = DEFAULT_TITLE,
    refresh_on_request: bool = False,
) -> APIRouter:
    """Router with the JSON document at ``json_path`` and Swagger UI at ``docs_path``."""
    if document is None and not entries:
        raise ValueError("Provide either a document or entries to generate one from")

    cache: dict[str, dict] = {}
    fill_lock = asyncio.Lock()

    def generate() -> dict:
        convention = resolve_convention(autoroutes_root=root)
        return analyze_to_openapi(entries, convention=convention, title=document_title)

    async def load() -> dict:
        if document is None:
            return await run_in_threadpool(generate)
        if inspect.iscoroutinefunction(document):
            return await document()
        if callable(document):
            result = await run_in_threadpool(document)
            if inspect.isawaitable(result):
                result = await result
            return result
        return document

    async def current_document() -> dict:
        if refresh_on_request:
            return await load()
        async with fill_lock:
            if "doc" not in cache:
                cache["doc"] = await load()
        return cache["doc"]

    router = APIRouter()

    @router.get(json_path, include_in_schema=False)
    async def openapi_json() -> JSONResponse:
        return JSONResponse(await current_document())

    @router.get(docs_path, include_in_schema=False)
    async def swagger_ui() -> HTMLResponse:
        return HTMLResponse(render_swagger_ui(title, json_path))

    return router


def mount_docs(
    app: FastAPI,
    document: DocumentSource | None = None,
    entries: list[str] | None = None,
    root: Path | None = None,
    docs_path: str = "/docs",
    json_path: str = "/openapi.json",
    title: str = "API Docs",
    document_title: str = DEFAULT_TITLE,
    refresh_on_request: bool = False,
) -> APIRouter:
    """Build the docs router and include it in ``app``."""
    router = build_docs_router(
        document,
        entries=entries,
        root=root,
        docs_path=docs_path,
        json_path=json_path,
        title=title,
        document_title=document_title,
        refresh_on_request=refresh_on_request,
    )
    app.include_router(router)
    return router
