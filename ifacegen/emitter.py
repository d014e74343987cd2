"""Render a directory aggregate into the text of its generated Go file."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from jinja2 import Environment, FileSystemLoader

from .models import DirectoryAggregate, GeneratedUnit

BANNER = "// Code generated by ifacegen; DO NOT EDIT."
TEMPLATE_NAME = "interface.go.j2"


def doc_comment_lines(doc: str) -> List[str]:
    """Turn a multi-line doc string into ``//`` lines, continuations tab-indented.

    Returns no lines when the doc is blank.
    """
    comment = doc.replace("\n", "\n//\t")
    if comment.endswith("\n//\t"):
        comment = comment[: -len("\n//\t")]
    if not comment.strip():
        return []
    return f"// {comment}".split("\n")


class InterfaceEmitter:
    """Builds ``interface_<package>.go`` contents from merged method sets."""

    def __init__(
        self,
        *,
        interface_suffix: str = "Interface",
        output_prefix: str = "interface_",
        extension: str = ".go",
        templates_dir: Path | None = None,
    ) -> None:
        self.interface_suffix = interface_suffix
        self.output_prefix = output_prefix
        self.extension = extension
        self._env = self._create_env(templates_dir)

    def output_path(self, aggregate: DirectoryAggregate) -> Path:
        return Path(aggregate.directory) / f"{self.output_prefix}{aggregate.package_name}{self.extension}"

    def render(self, aggregate: DirectoryAggregate) -> str:
        interfaces: List[Dict[str, object]] = []
        for type_name in aggregate.type_names:
            methods = aggregate.methods.get(type_name)
            if methods is None:
                continue
            interfaces.append(
                {
                    "name": f"{type_name}{self.interface_suffix}",
                    "doc_lines": doc_comment_lines(aggregate.type_docs.get(type_name, "")),
                    "method_lines": list(methods),
                }
            )
        template = self._env.get_template(TEMPLATE_NAME)
        return template.render(
            banner=BANNER,
            package_name=aggregate.package_name,
            imports=list(aggregate.imports),
            interfaces=interfaces,
        )

    def emit(self, aggregate: DirectoryAggregate) -> GeneratedUnit:
        return GeneratedUnit(
            directory=Path(aggregate.directory),
            path=self.output_path(aggregate),
            content=self.render(aggregate),
        )

    @staticmethod
    def _create_env(templates_dir: Optional[Path]) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        return Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )


__all__ = ["BANNER", "InterfaceEmitter", "doc_comment_lines"]
