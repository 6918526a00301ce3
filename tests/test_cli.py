import json
from pathlib import Path

import yaml
from click.testing import CliRunner

from hono_openapi.cli import main

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliGenerate:
    def test_generate_json(self, tmp_path):
        out = tmp_path / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, ["generate", "--entries", str(FIXTURES / "app.ts"), "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert "Found 8 routes." in result.output
        doc = json.loads(out.read_text(encoding="utf-8"))
        assert "/users/{id}" in doc["paths"]

    def test_generate_yaml_from_suffix(self, tmp_path):
        out = tmp_path / "docs" / "openapi.yaml"
        runner = CliRunner()
        result = runner.invoke(main, ["generate", "--root", str(FIXTURES / "routes"), "-o", str(out)])

        assert result.exit_code == 0, result.output
        doc = yaml.safe_load(out.read_text(encoding="utf-8"))
        assert set(doc["paths"]) == {"/users/{id}", "/admin/stats"}

    def test_generate_title_and_version(self, tmp_path):
        out = tmp_path / "document.txt"
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", "--autorouter", str(FIXTURES / "autorouter"),
            "-o", str(out), "--format", "json",
            "--title", "Blog", "--api-version", "1.2.3",
        ])

        assert result.exit_code == 0, result.output
        doc = json.loads(out.read_text(encoding="utf-8"))
        assert doc["info"] == {"title": "Blog", "version": "1.2.3"}
        assert "/blog/{id}" in doc["paths"]

    def test_strict_receivers(self, tmp_path):
        out = tmp_path / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", "--entries", str(FIXTURES / "app.ts"), "-o", str(out), "--strict-receivers",
        ])

        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text(encoding="utf-8"))["paths"] == {}

    def test_no_files_matched(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["generate", "--entries", f"{tmp_path}/**/*.ts", "-o", str(tmp_path / "o.json")])

        assert result.exit_code == 1
        assert "No files matched pattern" in result.output
        assert not (tmp_path / "o.json").exists()

    def test_both_conventions_rejected(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", "--root", str(FIXTURES / "routes"), "--autorouter", str(FIXTURES / "autorouter"),
            "-o", str(tmp_path / "o.json"),
        ])

        assert result.exit_code == 1
        assert "not both" in result.output


class TestCliRoutes:
    def test_lists_routes(self):
        runner = CliRunner()
        result = runner.invoke(main, ["routes", "--entries", str(FIXTURES / "app.ts")])

        assert result.exit_code == 0, result.output
        assert "POST    /users/:id  [400, 422, 201]" in result.output
        assert "GET     /missing  [404]" in result.output
        assert "8 routes." in result.output
