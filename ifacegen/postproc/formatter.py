"""Canonical formatting for generated Go files."""

from __future__ import annotations

import shutil
import subprocess
from typing import Callable, Optional, Sequence

from ..logging import get_logger

Canonicalizer = Callable[[str], str]
Runner = Callable[[Sequence[str], str], "subprocess.CompletedProcess[str]"]

DEFAULT_MAX_PASSES = 10

logger = get_logger("postproc.formatter")


class FormatError(RuntimeError):
    """Raised when generated text cannot be canonicalised."""


def identity_canonicalizer(text: str) -> str:
    return text


class CommandCanonicalizer:
    """Pipes text through an external formatter such as ``goimports``."""

    def __init__(self, command: Sequence[str], runner: Optional[Runner] = None) -> None:
        if not command:
            raise ValueError("formatter command must not be empty")
        self.command = list(command)
        self._runner = runner or self._default_runner

    @property
    def name(self) -> str:
        return self.command[0]

    def __call__(self, text: str) -> str:
        try:
            completed = self._runner(self.command, text)
        except OSError as exc:
            raise FormatError(f"{self.name} could not be started: {exc}") from exc
        if completed.returncode != 0:
            detail = (completed.stderr or completed.stdout or "").strip()
            raise FormatError(f"{self.name} exited with status {completed.returncode}: {detail}")
        return completed.stdout

    @staticmethod
    def _default_runner(args: Sequence[str], text: str) -> "subprocess.CompletedProcess[str]":
        return subprocess.run(
            list(args),
            input=text,
            capture_output=True,
            encoding="utf-8",
            check=False,
        )


def resolve_canonicalizer(
    name: str = "auto",
    *,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> Canonicalizer:
    """Return the canonicalizer for a ``formatter.command`` setting.

    ``auto`` prefers ``goimports`` (which also drops unused imports), then
    ``gofmt``, and writes unformatted output when neither is installed.
    """
    name = name.lower()
    if name == "none":
        return identity_canonicalizer
    if name == "auto":
        for candidate in ("goimports", "gofmt"):
            binary = which(candidate)
            if binary:
                logger.debug("Using %s at %s", candidate, binary)
                return CommandCanonicalizer([binary])
        logger.warning("Neither goimports nor gofmt found on PATH; generated files are left unformatted")
        return identity_canonicalizer
    if name in ("goimports", "gofmt"):
        binary = which(name)
        if binary is None:
            raise FormatError(f"{name} not found on PATH")
        return CommandCanonicalizer([binary])
    raise ValueError(f"Unknown formatter: {name}")


def stabilize(text: str, canonicalize: Canonicalizer, *, max_passes: int = DEFAULT_MAX_PASSES) -> str:
    """Reformat until the output stops changing.

    Raises FormatError when the canonicalizer fails or has not reached a
    fixed point after ``max_passes`` calls.
    """
    current = text
    for attempt in range(1, max_passes + 1):
        formatted = canonicalize(current)
        if formatted == current:
            logger.debug("Formatting stable after %d pass(es)", attempt)
            return formatted
        current = formatted
    raise FormatError(f"formatter output did not stabilise after {max_passes} passes")


__all__ = [
    "Canonicalizer",
    "CommandCanonicalizer",
    "DEFAULT_MAX_PASSES",
    "FormatError",
    "identity_canonicalizer",
    "resolve_canonicalizer",
    "stabilize",
]
