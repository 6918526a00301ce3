from pathlib import Path

import pytest

from hono_openapi.errors import ConventionConflictError, NoFilesMatchedError
from hono_openapi.parser.base import AnalyzerConfig
from hono_openapi.pipeline import analyze_file, analyze_files, analyze_to_openapi, resolve_convention
from hono_openapi.routing.autorouter import AutorouterConvention
from hono_openapi.routing.autoroutes import AutoroutesConvention

FIXTURES = Path(__file__).parent / "fixtures"
ROUTES = FIXTURES / "routes"
AUTOROUTER = FIXTURES / "autorouter"


class TestResolveConvention:
    def test_none(self):
        assert resolve_convention() is None

    def test_each_convention(self):
        assert isinstance(resolve_convention(autoroutes_root=ROUTES), AutoroutesConvention)
        assert isinstance(resolve_convention(autorouter_root=AUTOROUTER), AutorouterConvention)

    def test_both_is_an_error(self):
        with pytest.raises(ConventionConflictError):
            resolve_convention(autoroutes_root=ROUTES, autorouter_root=AUTOROUTER)


class TestAnalyzeFile:
    def test_plain_file(self):
        routes = analyze_file(FIXTURES / "app.ts")
        assert len(routes) == 8

    def test_unreadable_file_is_skipped(self, tmp_path):
        assert analyze_file(tmp_path / "missing.ts") == []

    def test_broken_file_is_skipped_with_warning(self, tmp_path, caplog):
        bad = tmp_path / "bad.ts"
        bad.write_text("app.get('/x', (c) => {\n")
        good = tmp_path / "good.ts"
        good.write_text("app.get('/ok', (c) => c.text('ok'))\n")
        routes = analyze_files([bad, good])
        assert [r.path for r in routes] == ["/ok"]
        assert "bad.ts" in caplog.text

    def test_strict_config_is_passed_through(self):
        assert analyze_file(FIXTURES / "app.ts", config=AnalyzerConfig(receiver_policy="router")) == []


class TestAnalyzeToOpenapi:
    def test_autoroutes_tree(self):
        convention = AutoroutesConvention(root=ROUTES)
        doc = analyze_to_openapi(convention=convention)
        assert set(doc["paths"]) == {"/users/{id}", "/admin/stats"}
        users = doc["paths"]["/users/{id}"]["get"]
        assert users["tags"] == ["/"]
        assert users["parameters"][0]["name"] == "id"
        stats = doc["paths"]["/admin/stats"]["get"]
        assert stats["tags"] == ["/", "/admin"]
        assert stats["responses"]["200"]["content"]["application/json"]["schema"]["required"] == ["users", "active"]

    def test_autorouter_tree(self):
        doc = analyze_to_openapi(convention=AutorouterConvention(root=AUTOROUTER))
        assert set(doc["paths"]) == {"/", "/blog/{id}", "/blog/{id}/comments", "/docs/{slug}"}
        post = doc["paths"]["/blog/{id}"]["get"]
        assert post["parameters"] == [{"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}]

    def test_explicit_entries(self):
        doc = analyze_to_openapi([str(FIXTURES / "app.ts")], title="Demo")
        assert doc["info"]["title"] == "Demo"
        assert "/users/{id}" in doc["paths"]
        assert set(doc["paths"]["/users/{id}"]["post"]["responses"]) == {"400", "422", "201"}

    def test_no_files_matched(self, tmp_path):
        with pytest.raises(NoFilesMatchedError) as excinfo:
            analyze_to_openapi([f"{tmp_path}/**/*.ts"])
        assert "No files matched pattern" in str(excinfo.value)
        assert excinfo.value.patterns == [f"{tmp_path}/**/*.ts"]
