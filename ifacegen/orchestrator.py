"""Pipeline orchestration: scan, analyse, aggregate, emit, format, write."""

from __future__ import annotations

import difflib
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from .aggregate import aggregate
from .analyzers import GoFileAnalyzer, ParseError, SourceAnalyzer
from .config import IfaceGenConfig, load_config
from .emitter import InterfaceEmitter
from .logging import get_logger, stopwatch
from .models import DirectoryAggregate, FileAnalysis, FileError, GeneratedUnit, RunReport
from .postproc.formatter import Canonicalizer, FormatError, resolve_canonicalizer, stabilize
from .repo_scanner import SourceScanner

OUTPUT_MODE = 0o644


class Orchestrator:
    """Coordinates one generation run over a directory tree.

    Collaborators default to the ones described by the root's
    ``.ifacegen.yml``; tests inject their own canonicalizer so no Go
    toolchain is needed.
    """

    def __init__(
        self,
        config: IfaceGenConfig | None = None,
        *,
        scanner: SourceScanner | None = None,
        analyzer: SourceAnalyzer | None = None,
        emitter: InterfaceEmitter | None = None,
        canonicalizer: Canonicalizer | None = None,
    ) -> None:
        self._config = config
        self._scanner = scanner
        self._analyzer = analyzer
        self._emitter = emitter
        self._canonicalizer = canonicalizer
        self.logger = get_logger("orchestrator")

    def run(
        self,
        path: str | Path,
        *,
        dry_run: bool = False,
        formatter: str | None = None,
        fail_fast: bool | None = None,
    ) -> RunReport:
        """Generate interface files for every directory under ``path``.

        Parse and read failures are collected per file unless ``fail_fast``
        (or ``on_parse_error: abort``) is set, in which case the first one is
        raised. Formatting and write failures only affect their directory.
        """
        root = Path(path).expanduser().resolve()
        config = self._config or load_config(root)
        abort = fail_fast if fail_fast is not None else config.on_parse_error == "abort"
        self.logger.info("Scanning %s", root)

        manifest = (self._scanner or SourceScanner(config)).scan(root)
        analyzer = self._analyzer or GoFileAnalyzer(
            interface_suffix=config.interface_suffix,
            extension=config.extension,
        )
        emitter = self._emitter or InterfaceEmitter(
            interface_suffix=config.interface_suffix,
            output_prefix=config.output_prefix,
            extension=config.extension,
            templates_dir=config.templates_dir,
        )
        canonicalize = self._canonicalizer or resolve_canonicalizer(formatter or config.formatter.command)

        report = RunReport(root=root, dry_run=dry_run)
        analyses = list(self._analyze(manifest.files, analyzer, report, abort=abort))
        self.logger.debug(
            "Analysed %d files; %d contributed methods", report.analysed, len(analyses)
        )

        for merged in aggregate(analyses).values():
            with stopwatch() as watch:
                unit = self._generate(
                    merged,
                    emitter,
                    canonicalize,
                    report,
                    max_passes=config.formatter.max_passes,
                    dry_run=dry_run,
                )
            if unit is None:
                continue
            report.units.append(unit)
            if dry_run:
                state = "stale" if unit.changed else "up to date"
                self.logger.info("%s %s (dry-run)", unit.path, state)
            else:
                self.logger.info("Generated %s in %s", unit.path, watch)

        return report

    def _analyze(
        self,
        files: Iterable[Path],
        analyzer: SourceAnalyzer,
        report: RunReport,
        *,
        abort: bool,
    ) -> Iterator[FileAnalysis]:
        for file_path in files:
            if not analyzer.supports(file_path):
                continue
            report.analysed += 1
            try:
                result = analyzer.analyze(file_path)
            except ParseError as exc:
                if abort:
                    raise
                self.logger.warning("Skipping %s: %s", file_path, exc.message)
                report.errors.append(FileError(path=file_path, message=str(exc), kind="parse"))
                continue
            except OSError as exc:
                if abort:
                    raise
                self.logger.warning("Skipping unreadable file %s: %s", file_path, exc)
                report.errors.append(FileError(path=file_path, message=str(exc), kind="io"))
                continue
            if result is not None:
                yield result

    def _generate(
        self,
        merged: DirectoryAggregate,
        emitter: InterfaceEmitter,
        canonicalize: Canonicalizer,
        report: RunReport,
        *,
        max_passes: int,
        dry_run: bool,
    ) -> Optional[GeneratedUnit]:
        unit = emitter.emit(merged)
        try:
            unit.content = stabilize(unit.content, canonicalize, max_passes=max_passes)
        except FormatError as exc:
            self.logger.error("Formatting failed for %s: %s", merged.directory, exc)
            report.errors.append(FileError(path=merged.directory, message=str(exc), kind="format"))
            return None

        previous = _read_existing(unit.path)
        unit.changed = previous != unit.content
        if dry_run:
            unit.diff = _unified_diff(unit.path, previous or "", unit.content)
            return unit

        try:
            unit.path.write_text(unit.content, encoding="utf-8")
            os.chmod(unit.path, OUTPUT_MODE)
        except OSError as exc:
            self.logger.error("Could not write %s: %s", unit.path, exc)
            report.errors.append(FileError(path=unit.path, message=str(exc), kind="io"))
            return None
        return unit


def _read_existing(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def _unified_diff(path: Path, before: str, after: str) -> str:
    lines: List[str] = list(
        difflib.unified_diff(
            before.splitlines(keepends=True),
            after.splitlines(keepends=True),
            fromfile=f"a/{path.name}",
            tofile=f"b/{path.name}",
        )
    )
    return "".join(lines)


__all__ = ["OUTPUT_MODE", "Orchestrator"]
