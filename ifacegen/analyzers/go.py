"""Go file analyzer: exported methods grouped by receiver type."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..logging import get_logger
from ..models import FileAnalysis, MethodSignature, TypeAnalysis
from .base import SourceAnalyzer
from .declarations import MethodDeclaration, exported_methods
from .docs import extract_type_docs, leading_comments
from .signatures import render_field_list, render_result
from .tree_sitter import GoParser, import_specs, node_text, package_name

logger = get_logger("analyzers.go")


def format_import(alias: Optional[str], path: str) -> str:
    """Render an import spec the way it is written inside an import block."""
    return f"{alias} {path}" if alias else path


def dedupe(items: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        ordered.append(item)
    return ordered


class GoFileAnalyzer(SourceAnalyzer):
    """Collects exported method signatures from one Go file."""

    extension = ".go"

    def __init__(
        self,
        *,
        interface_suffix: str = "Interface",
        extension: str | None = None,
        parser: GoParser | None = None,
    ) -> None:
        self.interface_suffix = interface_suffix
        if extension is not None:
            self.extension = extension
        self._parser = parser or GoParser()

    def supports(self, path: Path) -> bool:
        return Path(path).name.endswith(self.extension)

    def analyze(self, path: Path) -> Optional[FileAnalysis]:
        path = Path(path)
        return self.analyze_source(path.read_bytes(), path)

    def analyze_source(self, source: bytes, path: Path) -> Optional[FileAnalysis]:
        """Analyze in-memory source; raises ParseError on invalid Go."""
        tree = self._parser.parse(source, path)
        root = tree.root_node

        type_names: List[str] = []
        types: Dict[str, TypeAnalysis] = {}
        for method in exported_methods(root, source):
            analysis = types.get(method.type_name)
            if analysis is None:
                analysis = TypeAnalysis(type_name=method.type_name)
                types[method.type_name] = analysis
                type_names.append(method.type_name)
            analysis.methods.append(self._method_signature(method, source))

        if not types:
            logger.debug("No exported methods in %s", path)
            return None

        declared_docs = extract_type_docs(root, source)
        for name, analysis in types.items():
            type_doc = declared_docs.get(name, "")
            if type_doc.endswith("\n"):
                type_doc = type_doc[:-1]
            analysis.type_doc = f"{name}{self.interface_suffix} ...\n{type_doc}"

        imports = dedupe(format_import(alias, spec) for alias, spec in import_specs(root, source))

        return FileAnalysis(
            path=path,
            package_name=package_name(root, source) or "",
            type_names=type_names,
            types=types,
            imports=imports,
        )

    @staticmethod
    def _method_signature(method: MethodDeclaration, source: bytes) -> MethodSignature:
        node = method.node
        params = render_field_list(node.child_by_field_name("parameters"), source)
        results = render_result(node.child_by_field_name("result"), source)
        docs = tuple(
            node_text(comment, source).rstrip("\r") for comment in leading_comments(node)
        )
        return MethodSignature(code=f"{method.name}({params}) ({results})", docs=docs)


__all__ = ["GoFileAnalyzer", "dedupe", "format_import"]
