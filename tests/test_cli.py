"""CLI parser and entrypoint behaviour tests."""

from __future__ import annotations

import pytest

from ifacegen.cli import _build_parser, main
from tests._fixtures.go_tree import GoTreeBuilder

_CART = """
package shop

// Cart holds items.
type Cart struct{}

func (c *Cart) Total() (int) { return 0 }
"""


def test_cli_accepts_verbose_before_and_after_command() -> None:
    parser = _build_parser()

    assert parser.parse_args(["--verbose", "generate"]).verbose is True
    args = parser.parse_args(["generate", "--verbose"])
    assert args.verbose is True
    assert args.command == "generate"
    assert args.path == "."


def test_cli_generate_options() -> None:
    args = _build_parser().parse_args(
        ["generate", "src", "--dry-run", "--formatter", "gofmt", "--fail-fast"]
    )

    assert args.path == "src"
    assert args.dry_run is True
    assert args.formatter == "gofmt"
    assert args.fail_fast is True


def test_cli_defaults_leave_config_in_charge() -> None:
    args = _build_parser().parse_args(["check"])

    assert args.formatter is None
    assert args.fail_fast is None


def test_cli_rejects_unknown_formatter() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args(["generate", "--formatter", "black"])


def test_generate_writes_files(go_tree: GoTreeBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    go_tree.write({"shop/cart.go": _CART})

    main(["generate", str(go_tree.path()), "--formatter", "none", "--quiet"])

    assert go_tree.exists("shop/interface_shop.go")
    assert "interface_shop.go" in capsys.readouterr().out


def test_generate_dry_run_prints_diff(go_tree: GoTreeBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    go_tree.write({"shop/cart.go": _CART})

    main(["generate", str(go_tree.path()), "--dry-run", "--formatter", "none", "-q"])

    out = capsys.readouterr().out
    assert "+type CartInterface interface {" in out
    assert not go_tree.exists("shop/interface_shop.go")


def test_check_fails_when_stale_and_passes_after_generate(
    go_tree: GoTreeBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    go_tree.write({"shop/cart.go": _CART})

    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(go_tree.path()), "--formatter", "none", "-q"])
    assert excinfo.value.code == 1
    assert "stale:" in capsys.readouterr().out

    main(["generate", str(go_tree.path()), "--formatter", "none", "-q"])
    main(["check", str(go_tree.path()), "--formatter", "none", "-q"])
    assert "up to date" in capsys.readouterr().out


def test_parse_errors_exit_non_zero(go_tree: GoTreeBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    go_tree.write({"shop/cart.go": _CART, "broken/bad.go": "package broken\n\nfunc (b *Bad) Oops( {\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(go_tree.path()), "--formatter", "none", "-q"])

    assert excinfo.value.code == 1
    assert "error (parse)" in capsys.readouterr().err
    assert go_tree.exists("shop/interface_shop.go")


def test_missing_path_exits_with_message(tmp_path, capsys: pytest.CaptureFixture[str]) -> None:  # type: ignore[no-untyped-def]
    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(tmp_path / "nope"), "--formatter", "none"])

    assert excinfo.value.code == 1
    assert "Scan path not found" in capsys.readouterr().err
