"""Source loading: turns TypeScript / TSX files into tree-sitter syntax trees."""

import logging
from dataclasses import dataclass
from pathlib import Path

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

logger = logging.getLogger(__name__)

TSX_SUFFIXES = {".tsx", ".jsx"}

_LANGUAGES = {
    "typescript": Language(tree_sitter_typescript.language_typescript()),
    "tsx": Language(tree_sitter_typescript.language_tsx()),
}
_PARSERS: dict[str, Parser] = {}


@dataclass
class SourceFile:
    """A parsed source file."""

    path: Path | None
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node


def _parser(dialect: str) -> Parser:
    if dialect not in _PARSERS:
        _PARSERS[dialect] = Parser(_LANGUAGES[dialect])
    return _PARSERS[dialect]


def parse_source(text: str, path: Path | None = None, tsx: bool = False) -> SourceFile | None:
    """Parse source text. Returns None when the text has syntax errors."""
    dialect = "tsx" if tsx else "typescript"
    tree = _parser(dialect).parse(text.encode("utf-8"))
    if tree.root_node.has_error:
        logger.warning("Skipping %s: syntax errors", path or "<source>")
        return None
    return SourceFile(path=path, tree=tree)


def load_source(file_path: Path) -> SourceFile | None:
    """Read and parse a file, or return None if it cannot be read or parsed."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Skipping %s: %s", file_path, e)
        return None
    return parse_source(text, path=file_path, tsx=file_path.suffix.lower() in TSX_SUFFIXES)
