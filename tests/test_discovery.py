from pathlib import Path

from hono_openapi.discovery import default_entries, discover_files, expand_braces
from hono_openapi.routing.autorouter import AutorouterConvention
from hono_openapi.routing.autoroutes import AutoroutesConvention

FIXTURES = Path(__file__).parent / "fixtures"


class TestExpandBraces:
    def test_no_braces(self):
        assert expand_braces("src/**/*.ts") == ["src/**/*.ts"]

    def test_alternatives(self):
        assert expand_braces("src/*.{ts,tsx}") == ["src/*.ts", "src/*.tsx"]

    def test_nested_groups(self):
        assert expand_braces("{a,b}/*.{ts,js}") == ["a/*.ts", "a/*.js", "b/*.ts", "b/*.js"]


class TestDiscoverFiles:
    def test_recursive_glob(self, tmp_path):
        (tmp_path / "src" / "api").mkdir(parents=True)
        (tmp_path / "src" / "index.ts").write_text("")
        (tmp_path / "src" / "api" / "users.ts").write_text("")
        (tmp_path / "src" / "api" / "notes.md").write_text("")
        files = discover_files([f"{tmp_path}/src/**/*.ts"])
        assert [f.name for f in files] == ["users.ts", "index.ts"]
        assert all(f.is_absolute() for f in files)

    def test_ignores_declarations_node_modules_and_dot_dirs(self, tmp_path):
        (tmp_path / "node_modules" / "hono").mkdir(parents=True)
        (tmp_path / ".cache").mkdir()
        (tmp_path / "app.ts").write_text("")
        (tmp_path / "types.d.ts").write_text("")
        (tmp_path / "node_modules" / "hono" / "index.ts").write_text("")
        (tmp_path / ".cache" / "x.ts").write_text("")
        files = discover_files([f"{tmp_path}/**/*.ts"])
        assert [f.name for f in files] == ["app.ts"]

    def test_sorted_and_deduplicated(self, tmp_path):
        for name in ("b.ts", "a.ts"):
            (tmp_path / name).write_text("")
        files = discover_files([f"{tmp_path}/*.ts", f"{tmp_path}/a.ts"])
        assert files == sorted(files)
        assert [f.name for f in files] == ["a.ts", "b.ts"]

    def test_brace_pattern_over_fixture_tree(self):
        files = discover_files([f"{FIXTURES}/routes/**/route.{{ts,tsx}}"])
        assert {f.parent.name for f in files} == {"users", "stats"}

    def test_relative_paths(self, tmp_path, monkeypatch):
        (tmp_path / "a.ts").write_text("")
        monkeypatch.chdir(tmp_path)
        assert discover_files(["*.ts"], absolute=False) == [Path("a.ts")]

    def test_no_match(self, tmp_path):
        assert discover_files([f"{tmp_path}/**/*.ts"]) == []

    def test_single_star_stays_in_base_directory(self, tmp_path):
        (tmp_path / "src" / "api").mkdir(parents=True)
        (tmp_path / "src" / "index.ts").write_text("")
        (tmp_path / "src" / "api" / "users.ts").write_text("")
        files = discover_files([f"{tmp_path}/src/*.ts"])
        assert [f.name for f in files] == ["index.ts"]

    def test_extra_ignore_lines(self, tmp_path):
        (tmp_path / "generated").mkdir()
        (tmp_path / "app.ts").write_text("")
        (tmp_path / "app.test.ts").write_text("")
        (tmp_path / "generated" / "client.ts").write_text("")
        files = discover_files([f"{tmp_path}/**/*.ts"], ignore=["*.test.ts", "generated/"])
        assert [f.name for f in files] == ["app.ts"]

    def test_exact_declaration_file_is_ignored(self, tmp_path):
        (tmp_path / "types.d.ts").write_text("")
        assert discover_files([f"{tmp_path}/types.d.ts"]) == []


class TestDefaultEntries:
    def test_plain(self):
        assert default_entries(None) == ["src/**/*.ts"]

    def test_autoroutes(self):
        assert default_entries(AutoroutesConvention(root=Path("routes"))) == ["routes/**/route.{ts,tsx}"]

    def test_autorouter(self):
        assert default_entries(AutorouterConvention(root=Path("app"))) == ["app/**/*.{ts,tsx}"]
