"""Tests for the fixed-point formatter driver and canonicalizers."""

from __future__ import annotations

import subprocess
from typing import List, Sequence

import pytest

from ifacegen.postproc.formatter import (
    CommandCanonicalizer,
    FormatError,
    identity_canonicalizer,
    resolve_canonicalizer,
    stabilize,
)


class _CountingCanonicalizer:
    """Collapses one pair of doubled spaces per call."""

    def __init__(self) -> None:
        self.calls: List[str] = []

    def __call__(self, text: str) -> str:
        self.calls.append(text)
        return text.replace("  ", " ", 1)


def test_stabilize_repeats_until_output_stops_changing() -> None:
    canonicalize = _CountingCanonicalizer()

    result = stabilize("a    b", canonicalize)

    assert result == "a b"
    assert len(canonicalize.calls) == 4


def test_stabilize_is_a_fixed_point_on_stable_text() -> None:
    canonicalize = _CountingCanonicalizer()

    once = stabilize("a    b", canonicalize)
    twice = stabilize(once, canonicalize)
    thrice = stabilize(twice, canonicalize)

    assert once == twice == thrice


def test_stabilize_gives_up_after_max_passes() -> None:
    counter = iter(range(100))

    def never_stable(text: str) -> str:
        return f"{text}{next(counter)}"

    with pytest.raises(FormatError, match="did not stabilise after 3 passes"):
        stabilize("x", never_stable, max_passes=3)


def test_stabilize_propagates_canonicalizer_failure() -> None:
    def broken(text: str) -> str:
        raise FormatError("expected declaration")

    with pytest.raises(FormatError, match="expected declaration"):
        stabilize("package p\n", broken)


def _runner(returncode: int, stdout: str = "", stderr: str = ""):  # type: ignore[no-untyped-def]
    seen: List[Sequence[str]] = []

    def run(args: Sequence[str], text: str) -> subprocess.CompletedProcess[str]:
        seen.append(list(args))
        return subprocess.CompletedProcess(list(args), returncode, stdout=stdout or text, stderr=stderr)

    run.seen = seen  # type: ignore[attr-defined]
    return run


def test_command_canonicalizer_returns_stdout() -> None:
    runner = _runner(0, stdout="package p\n")
    canonicalize = CommandCanonicalizer(["/usr/bin/gofmt"], runner=runner)

    assert canonicalize("package  p") == "package p\n"
    assert runner.seen == [["/usr/bin/gofmt"]]  # type: ignore[attr-defined]
    assert canonicalize.name == "/usr/bin/gofmt"


def test_command_canonicalizer_maps_failures_to_format_error() -> None:
    canonicalize = CommandCanonicalizer(["gofmt"], runner=_runner(2, stderr="<standard input>:3:1: expected declaration"))

    with pytest.raises(FormatError, match="expected declaration"):
        canonicalize("garbage")


def test_command_canonicalizer_reports_missing_binary() -> None:
    def missing(args: Sequence[str], text: str) -> subprocess.CompletedProcess[str]:
        raise FileNotFoundError(2, "No such file or directory", args[0])

    with pytest.raises(FormatError, match="could not be started"):
        CommandCanonicalizer(["goimports"], runner=missing)("package p\n")


def test_resolve_auto_prefers_goimports_then_gofmt() -> None:
    available = {"goimports": "/go/bin/goimports", "gofmt": "/usr/local/go/bin/gofmt"}

    chosen = resolve_canonicalizer("auto", which=available.get)
    assert isinstance(chosen, CommandCanonicalizer)
    assert chosen.command == ["/go/bin/goimports"]

    only_gofmt = {"gofmt": "/usr/local/go/bin/gofmt"}
    chosen = resolve_canonicalizer("auto", which=only_gofmt.get)
    assert isinstance(chosen, CommandCanonicalizer)
    assert chosen.command == ["/usr/local/go/bin/gofmt"]


def test_resolve_auto_without_toolchain_leaves_text_alone() -> None:
    assert resolve_canonicalizer("auto", which=lambda name: None) is identity_canonicalizer
    assert resolve_canonicalizer("none") is identity_canonicalizer


def test_resolve_explicit_formatter_must_exist() -> None:
    with pytest.raises(FormatError, match="gofmt not found"):
        resolve_canonicalizer("gofmt", which=lambda name: None)

    with pytest.raises(ValueError):
        resolve_canonicalizer("clang-format")
