"""Source analyzers that turn Go files into per-type method sets."""

from .base import SourceAnalyzer
from .go import GoFileAnalyzer
from .tree_sitter import GoParser, ParseError

__all__ = ["GoFileAnalyzer", "GoParser", "ParseError", "SourceAnalyzer"]
