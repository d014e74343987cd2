"""Base classes for source analyzers."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..models import FileAnalysis


class SourceAnalyzer(ABC):
    """Contract for analyzers that turn one source file into a FileAnalysis."""

    @abstractmethod
    def supports(self, path: Path) -> bool:
        """Return True when this analyzer understands the file."""

    @abstractmethod
    def analyze(self, path: Path) -> Optional[FileAnalysis]:
        """Return the file's contribution, or None when it has nothing to offer."""
