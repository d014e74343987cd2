"""Core data models shared across ifacegen components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional


@dataclass(frozen=True)
class MethodSignature:
    """One exported method as it will appear inside the generated interface."""

    code: str
    docs: tuple[str, ...] = ()

    def lines(self) -> Iterator[str]:
        yield from self.docs
        yield self.code


@dataclass
class TypeAnalysis:
    """Exported methods found for one receiver type within a single file."""

    type_name: str
    methods: List[MethodSignature] = field(default_factory=list)
    type_doc: str = ""


@dataclass
class FileAnalysis:
    """Everything one Go file contributes to its directory's generated file."""

    path: Path
    package_name: str
    type_names: List[str] = field(default_factory=list)
    types: Dict[str, TypeAnalysis] = field(default_factory=dict)
    imports: List[str] = field(default_factory=list)

    @property
    def directory(self) -> Path:
        return self.path.parent


@dataclass
class DirectoryAggregate:
    """Merged view of every analysed file sharing one output directory."""

    directory: Path
    package_name: str
    type_names: List[str] = field(default_factory=list)
    methods: Dict[str, List[str]] = field(default_factory=dict)
    type_docs: Dict[str, str] = field(default_factory=dict)
    imports: List[str] = field(default_factory=list)
    sources: List[Path] = field(default_factory=list)


@dataclass
class GeneratedUnit:
    """Rendered interface file ready to be written."""

    directory: Path
    path: Path
    content: str
    diff: Optional[str] = None
    changed: bool = True


@dataclass
class FileError:
    """A failure tied to one input file or output directory."""

    path: Path
    message: str
    kind: str = "parse"


@dataclass
class SourceManifest:
    """Candidate Go files discovered beneath the scan root."""

    root: Path
    files: List[Path] = field(default_factory=list)


@dataclass
class RunReport:
    """Outcome of one generation run across all directories."""

    root: Path
    units: List[GeneratedUnit] = field(default_factory=list)
    errors: List[FileError] = field(default_factory=list)
    analysed: int = 0
    dry_run: bool = False

    @property
    def written(self) -> List[GeneratedUnit]:
        if self.dry_run:
            return []
        return list(self.units)

    @property
    def stale(self) -> List[GeneratedUnit]:
        return [unit for unit in self.units if unit.changed]

    @property
    def ok(self) -> bool:
        return not self.errors
