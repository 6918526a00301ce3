from pathlib import Path

from hono_openapi.parser.base import RouteRecord
from hono_openapi.routing.autorouter import AutorouterConvention, compute_autorouter_path, convert_segment, is_method_file
from hono_openapi.routing.autoroutes import (
    AutoroutesConvention,
    compute_autoroute_prefix,
    find_middleware_scopes,
    is_route_file,
)
from hono_openapi.routing.compose import compose_routes
from hono_openapi.routing.paths import extract_path_params, join_route_paths, to_openapi_path

FIXTURES = Path(__file__).parent / "fixtures"
ROUTES = FIXTURES / "routes"
AUTOROUTER = FIXTURES / "autorouter"


class TestPaths:
    def test_extract_path_params(self):
        assert extract_path_params("/a/:id/b/:slug") == ["id", "slug"]
        assert extract_path_params("/static") == []

    def test_to_openapi_path(self):
        assert to_openapi_path("/users/:id") == "/users/{id}"
        assert to_openapi_path("/posts/:id{[0-9]+}/c") == "/posts/{id}/c"

    def test_join(self):
        assert join_route_paths("/users", "/:id") == "/users/:id"
        assert join_route_paths("/users/", "/") == "/users"
        assert join_route_paths("/", "/x") == "/x"
        assert join_route_paths(None, "x") == "/x"
        assert join_route_paths("/", "") == "/"


class TestAutoroutes:
    def test_is_route_file(self):
        assert is_route_file(Path("a/route.ts"))
        assert is_route_file(Path("a/route.tsx"))
        assert not is_route_file(Path("a/routes.ts"))
        assert not is_route_file(Path("a/middleware.ts"))

    def test_prefix(self):
        assert compute_autoroute_prefix(ROUTES / "users" / "route.ts", ROUTES) == "/users"
        assert compute_autoroute_prefix(ROUTES / "route.ts", ROUTES) == "/"
        assert compute_autoroute_prefix(FIXTURES / "app.ts", ROUTES) is None

    def test_middleware_scopes_shallow_to_deep(self):
        scopes = find_middleware_scopes(ROUTES / "admin" / "stats" / "route.ts", ROUTES)
        assert scopes == ["/", "/admin"]

    def test_middleware_scope_at_root_only(self):
        assert find_middleware_scopes(ROUTES / "users" / "route.ts", ROUTES) == ["/"]


class TestAutorouter:
    def test_convert_segment(self):
        assert convert_segment("[id]") == ":id"
        assert convert_segment("[...slug]") == ":slug"
        assert convert_segment("[[...slug]]") == ":slug"
        assert convert_segment("blog") == "blog"

    def test_method_file(self):
        assert is_method_file("GET") == "get"
        assert is_method_file("show") is None

    def test_index_and_method_files_add_no_segment(self):
        assert compute_autorouter_path(AUTOROUTER, AUTOROUTER / "blog" / "[id]" / "index.ts") == "/blog/:id"
        assert compute_autorouter_path(AUTOROUTER, AUTOROUTER / "blog" / "[id]" / "get.ts") == "/blog/:id"

    def test_root_index(self):
        assert compute_autorouter_path(AUTOROUTER, AUTOROUTER / "index.ts") == "/"

    def test_catch_all_file_name(self):
        assert compute_autorouter_path(AUTOROUTER, AUTOROUTER / "docs" / "[...slug].ts") == "/docs/:slug"

    def test_outside_root(self):
        assert compute_autorouter_path(AUTOROUTER, FIXTURES / "app.ts") is None


class TestCompose:
    def _route(self, path: str) -> RouteRecord:
        return RouteRecord(method="get", path=path, path_params=extract_path_params(path))

    def test_no_convention(self):
        routes = [self._route("/x")]
        assert compose_routes(routes, FIXTURES / "app.ts", None) == routes

    def test_autoroutes_prefix_and_scopes(self):
        convention = AutoroutesConvention(root=ROUTES)
        [route] = compose_routes([self._route("/:id")], ROUTES / "users" / "route.ts", convention)
        assert route.path == "/users/:id"
        assert route.path_params == ["id"]
        assert route.middleware_scopes == ["/"]

    def test_autoroutes_ignores_other_files(self):
        convention = AutoroutesConvention(root=ROUTES)
        [route] = compose_routes([self._route("/x")], ROUTES / "middleware.ts", convention)
        assert route.path == "/x"
        assert route.middleware_scopes is None

    def test_autorouter_prefix_reprojects_params(self):
        convention = AutorouterConvention(root=AUTOROUTER)
        [route] = compose_routes([self._route("/")], AUTOROUTER / "blog" / "[id]" / "index.ts", convention)
        assert route.path == "/blog/:id"
        assert route.path_params == ["id"]
