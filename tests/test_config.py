"""Tests for ifacegen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from ifacegen.config import ConfigError, IfaceGenConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, IfaceGenConfig)
    assert config.root == tmp_path.resolve()
    assert config.interface_suffix == "Interface"
    assert config.output_prefix == "interface_"
    assert config.skip_prefixes == ["mock_"]
    assert config.ignored_prefixes == ["interface_", "mock_"]
    assert config.extension == ".go"
    assert config.exclude_paths == []
    assert config.formatter.command == "auto"
    assert config.formatter.max_passes == 10
    assert config.on_parse_error == "skip"
    assert config.templates_dir is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / ".ifacegen.yml").write_text(
        """
interface_suffix: API
output_prefix: "iface_"
skip_prefixes:
  - mock_
  - fake_
extension: go
exclude_paths: ["*_test.go", "vendor/"]
formatter:
  command: gofmt
  max_passes: 3
on_parse_error: abort
templates_dir: build/templates
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path / ".ifacegen.yml")

    assert config.interface_suffix == "API"
    assert config.output_prefix == "iface_"
    assert config.skip_prefixes == ["mock_", "fake_"]
    assert config.extension == ".go"
    assert config.exclude_paths == ["*_test.go", "vendor/"]
    assert config.formatter.command == "gofmt"
    assert config.formatter.max_passes == 3
    assert config.on_parse_error == "abort"
    assert config.templates_dir == tmp_path.resolve() / "build" / "templates"


def test_formatter_may_be_given_as_a_plain_string(tmp_path: Path) -> None:
    (tmp_path / ".ifacegen.yml").write_text("formatter: none\n", encoding="utf-8")

    assert load_config(tmp_path).formatter.command == "none"


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".ifacegen.yml").write_text("\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.interface_suffix == "Interface"


def test_blank_skip_prefixes_are_ignored(tmp_path: Path) -> None:
    (tmp_path / ".ifacegen.yml").write_text(
        'skip_prefixes: ["", fake_]\n', encoding="utf-8"
    )

    config = load_config(tmp_path)

    assert config.skip_prefixes == ["fake_"]
    assert config.ignored_prefixes == ["interface_", "fake_"]


def test_load_config_resolves_sibling_file_path(tmp_path: Path) -> None:
    (tmp_path / ".ifacegen.yml").write_text("interface_suffix: Port\n", encoding="utf-8")

    config = load_config(tmp_path / "cart.go")

    assert config.interface_suffix == "Port"


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",
        "formatter:\n  command: prettier\n",
        "formatter:\n  max_passes: 0\n",
        "on_parse_error: ignore\n",
        "interface_suffix: [unclosed\n",
    ],
)
def test_invalid_config_raises(tmp_path: Path, content: str) -> None:
    (tmp_path / ".ifacegen.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
