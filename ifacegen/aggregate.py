"""Merge per-file analyses into one aggregate per output directory."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable

from .models import DirectoryAggregate, FileAnalysis


def merge(aggregate: DirectoryAggregate, analysis: FileAnalysis) -> DirectoryAggregate:
    """Fold one file into its directory aggregate, in arrival order.

    Method lines are appended per type; a type seen for the first time is
    recorded at the end of the type order. A type's doc comes from the first
    file that documents it; later files never replace it. Imports are
    deduplicated by their full text, so the same path under two aliases is
    kept twice.
    """
    for type_name in analysis.type_names:
        type_analysis = analysis.types[type_name]
        lines = aggregate.methods.get(type_name)
        if lines is None:
            lines = []
            aggregate.methods[type_name] = lines
            aggregate.type_names.append(type_name)
        for method in type_analysis.methods:
            lines.extend(method.lines())
        aggregate.type_docs.setdefault(type_name, type_analysis.type_doc)

    known = set(aggregate.imports)
    for spec in analysis.imports:
        if spec not in known:
            known.add(spec)
            aggregate.imports.append(spec)

    aggregate.sources.append(analysis.path)
    return aggregate


def aggregate(analyses: Iterable[FileAnalysis]) -> Dict[Path, DirectoryAggregate]:
    """Group analyses by directory; the first file of a directory names the package."""
    aggregates: Dict[Path, DirectoryAggregate] = {}
    for analysis in analyses:
        directory = analysis.directory
        current = aggregates.get(directory)
        if current is None:
            current = DirectoryAggregate(directory=directory, package_name=analysis.package_name)
            aggregates[directory] = current
        merge(current, analysis)
    return aggregates


__all__ = ["aggregate", "merge"]
