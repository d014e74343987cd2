"""Tree-sitter powered Go parser."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional, Tuple

import tree_sitter_go
from tree_sitter import Language, Node, Parser, Tree

GO_LANGUAGE = Language(tree_sitter_go.language())


class ParseError(ValueError):
    """Raised when Go source is not syntactically valid."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.line = line
        self.column = column

    def __str__(self) -> str:
        location = str(self.path) if self.path is not None else "<source>"
        if self.line is not None:
            location = f"{location}:{self.line}"
            if self.column is not None:
                location = f"{location}:{self.column}"
        return f"{location}: {self.message}"


class GoParser:
    """Parses Go source into a tree-sitter syntax tree, comments included."""

    def __init__(self) -> None:
        self._parser = Parser(GO_LANGUAGE)

    def parse(self, source: bytes, path: Path | None = None) -> Tree:
        try:
            source.decode("utf-8")
        except UnicodeDecodeError as exc:
            line_start = source.rfind(b"\n", 0, exc.start) + 1
            raise ParseError(
                "illegal UTF-8 encoding",
                path=path,
                line=source.count(b"\n", 0, exc.start) + 1,
                column=exc.start - line_start + 1,
            ) from exc
        tree = self._parser.parse(source)
        root = tree.root_node
        if root.has_error:
            bad = _first_error(root) or root
            row, column = bad.start_point
            if bad.is_missing:
                message = f"missing {bad.type}"
            else:
                snippet = node_text(bad, source).strip().splitlines()
                message = f"syntax error near {snippet[0][:40]!r}" if snippet else "syntax error"
            raise ParseError(message, path=path, line=row + 1, column=column + 1)
        if package_name(root, source) is None:
            raise ParseError("expected 'package' clause", path=path, line=1, column=1)
        return tree


def _first_error(node: Node) -> Optional[Node]:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def package_name(root: Node, source: bytes) -> Optional[str]:
    for child in root.named_children:
        if child.type != "package_clause":
            continue
        for part in child.named_children:
            if part.type == "package_identifier":
                return node_text(part, source)
    return None


def import_specs(root: Node, source: bytes) -> Iterator[Tuple[Optional[str], str]]:
    """Yield ``(alias, path literal)`` pairs for every import in the file.

    The path is returned exactly as written, quotes included.
    """
    for declaration in root.named_children:
        if declaration.type != "import_declaration":
            continue
        for child in declaration.named_children:
            specs = child.named_children if child.type == "import_spec_list" else [child]
            for spec in specs:
                if spec.type != "import_spec":
                    continue
                path_node = spec.child_by_field_name("path")
                if path_node is None:
                    continue
                alias_node = spec.child_by_field_name("name")
                alias = node_text(alias_node, source) if alias_node is not None else None
                yield alias, node_text(path_node, source)


__all__ = [
    "GO_LANGUAGE",
    "GoParser",
    "ParseError",
    "import_specs",
    "node_text",
    "package_name",
]
