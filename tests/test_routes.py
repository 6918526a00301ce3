from pathlib import Path

from hono_openapi.parser.base import AnalyzerConfig
from hono_openapi.parser.routes import analyze_source
from hono_openapi.parser.source import load_source, parse_source

FIXTURES = Path(__file__).parent / "fixtures"


def _routes(src: str, config: AnalyzerConfig | None = None):
    source = parse_source(src)
    assert source is not None
    return analyze_source(source, config)


class TestRouteMatcher:
    def test_finds_method_and_path(self):
        routes = _routes("app.get('/a', (c) => c.text('x'))\napp.post('/b', (c) => c.text('y'))\n")
        assert [(r.method, r.path) for r in routes] == [("get", "/a"), ("post", "/b")]

    def test_path_params(self):
        routes = _routes("app.get('/users/:id/posts/:postId', (c) => c.text('x'))\n")
        assert routes[0].path_params == ["id", "postId"]

    def test_non_literal_path_is_ignored(self):
        assert _routes("const p = '/x'\napp.get(p, (c) => c.text('x'))\n") == []

    def test_non_http_method_is_ignored(self):
        assert _routes("app.use('/x', (c) => c.text('x'))\napp.fetch('/y')\n") == []

    def test_template_literal_path(self):
        routes = _routes("app.delete(`/items/:id`, (c) => c.body(null, 204))\n")
        assert routes[0].method == "delete"
        assert routes[0].path == "/items/:id"

    def test_last_function_argument_is_the_handler(self):
        routes = _routes(
            "const auth = async (c, next) => { await next() }\n"
            "app.get('/me', auth, (c) => c.json({ ok: true }))\n"
        )
        assert routes[0].responses[0].content_schema.to_openapi()["properties"] == {"ok": {"type": "boolean"}}

    def test_handler_passed_by_name(self):
        routes = _routes(
            "function show(c) { return c.text('hi') }\n"
            "app.get('/hi', show)\n"
        )
        assert routes[0].responses[0].media_type == "text/plain"

    def test_route_without_handler_still_reported(self):
        routes = _routes("app.get('/x')\n")
        assert routes[0].path == "/x"
        assert routes[0].responses == []

    def test_chained_registrations(self):
        routes = _routes("app.get('/a', (c) => c.text('a')).post('/b', (c) => c.text('b'))\n")
        assert {r.path for r in routes} == {"/a", "/b"}

    def test_any_receiver_accepted_by_default(self):
        routes = _routes("const client = makeClient()\nclient.get('/users', (c) => c.text('x'))\n")
        assert len(routes) == 1


class TestStrictReceivers:
    def test_router_policy_requires_router_type(self):
        src = (
            "import { Hono } from 'hono'\n"
            "const app = new Hono()\n"
            "const client = makeClient()\n"
            "app.get('/a', (c) => c.text('a'))\n"
            "client.get('/b', (c) => c.text('b'))\n"
        )
        routes = _routes(src, AnalyzerConfig(receiver_policy="router"))
        assert [r.path for r in routes] == ["/a"]

    def test_router_policy_follows_chains(self):
        src = "const app = new Hono()\napp.basePath('/v1').get('/a', (c) => c.text('a'))\n"
        routes = _routes(src, AnalyzerConfig(receiver_policy="router"))
        assert [r.path for r in routes] == ["/a"]

    def test_router_policy_accepts_annotated_receiver(self):
        src = "const api: OpenAPIHono = make()\napi.get('/a', (c) => c.text('a'))\n"
        routes = _routes(src, AnalyzerConfig(receiver_policy="router"))
        assert len(routes) == 1

    def test_custom_router_types(self):
        src = "const app = new FakeRouter()\napp.get('/a', (c) => c.text('a'))\n"
        config = AnalyzerConfig(receiver_policy="router", router_types=["FakeRouter"])
        assert len(_routes(src, config)) == 1


class TestEndToEnd:
    def test_expression_bodied_handler(self):
        routes = _routes("app.get('/:id', ctx => ctx.json({ user: ctx.req.param('id') }))\n")
        assert len(routes) == 1
        route = routes[0]
        assert route.path_params == ["id"]
        assert route.responses[0].status is None
        assert route.responses[0].media_type == "application/json"
        assert route.response_schema.to_openapi() == {
            "type": "object",
            "properties": {"user": {"type": "string"}},
            "required": ["user"],
        }

    def test_fixture_app(self):
        routes = analyze_source(load_source(FIXTURES / "app.ts"))
        assert [(r.method, r.path) for r in routes] == [
            ("get", "/ping"),
            ("get", "/txt"),
            ("get", "/bin"),
            ("get", "/go"),
            ("get", "/stream"),
            ("get", "/page"),
            ("get", "/missing"),
            ("post", "/users/:id"),
        ]

    def test_fixture_app_users_route(self):
        routes = analyze_source(load_source(FIXTURES / "app.ts"))
        users = routes[-1]
        assert [r.status for r in users.responses] == [400, 422, 201]
        assert users.responses[-1].content_schema.to_openapi() == {
            "type": "object",
            "properties": {
                "id": {"type": "string"},
                "name": {"type": "string"},
                "age": {"type": "number", "nullable": True},
            },
            "required": ["id", "name"],
        }
        assert users.request_body_schema.to_openapi() == {
            "type": "object",
            "properties": {"name": {"type": "string"}, "age": {"type": "number"}},
            "required": ["name"],
        }
        assert users.query_schema.to_openapi() == {
            "type": "object",
            "properties": {"page": {"type": "string", "nullable": True}},
        }

    def test_broken_source_is_skipped(self):
        assert parse_source("app.get('/x', (c) => {\n") is None
