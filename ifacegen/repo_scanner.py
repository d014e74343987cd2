"""Discovery of Go source files beneath a scan root."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

from .config import IfaceGenConfig
from .logging import get_logger
from .models import SourceManifest

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
}

logger = get_logger("repo_scanner")


@dataclass
class IgnoreRule:
    """An ``exclude_paths`` entry using gitignore-style matching."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            return fnmatchcase(rel_path, self.pattern)

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


class SourceScanner:
    """Walks a directory tree and lists the Go files worth analysing.

    Generated files (the output prefix) and mocks (``skip_prefixes``) are
    left out, as is anything without the configured extension or matching
    ``exclude_paths``.
    """

    def __init__(self, config: IfaceGenConfig | None = None) -> None:
        self.config = config

    def scan(self, root: str | Path) -> SourceManifest:
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Scan path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Scan path is not a directory: {root}")

        config = self.config or IfaceGenConfig(root=root_path)
        rules: List[IgnoreRule] = []
        for pattern in config.exclude_paths:
            rule = build_ignore_rule(pattern)
            if rule is not None:
                rules.append(rule)

        files = list(self._iter_files(root_path, config, rules))
        logger.debug("Found %d candidate files under %s", len(files), root_path)
        return SourceManifest(root=root_path, files=files)

    @staticmethod
    def _iter_files(
        root: Path, config: IfaceGenConfig, rules: Sequence[IgnoreRule]
    ) -> Iterator[Path]:
        prefixes = tuple(config.ignored_prefixes)
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept = []
            for name in sorted(dirnames):
                if name in _EXCLUDED_DIRS:
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if _should_ignore(rel_path, True, rules):
                    continue
                kept.append(name)
            dirnames[:] = kept

            for filename in sorted(filenames):
                if filename.startswith(prefixes):
                    continue
                if not filename.endswith(config.extension):
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _should_ignore(rel_path, False, rules):
                    continue
                yield current_dir / filename


__all__ = ["IgnoreRule", "SourceScanner", "build_ignore_rule"]
