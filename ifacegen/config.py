"""Configuration loading for ifacegen (.ifacegen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".ifacegen.yml"

FORMATTER_CHOICES = ("auto", "goimports", "gofmt", "none")
PARSE_ERROR_POLICIES = ("skip", "abort")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class FormatterConfig:
    """How generated files are canonicalised before being written."""

    command: str = "auto"
    max_passes: int = 10


@dataclass
class IfaceGenConfig:
    """Represents the settings defined in .ifacegen.yml."""

    root: Path
    interface_suffix: str = "Interface"
    output_prefix: str = "interface_"
    skip_prefixes: List[str] = field(default_factory=lambda: ["mock_"])
    extension: str = ".go"
    exclude_paths: List[str] = field(default_factory=list)
    formatter: FormatterConfig = field(default_factory=FormatterConfig)
    on_parse_error: str = "skip"
    templates_dir: Optional[Path] = None

    @property
    def ignored_prefixes(self) -> List[str]:
        """Filename prefixes never analysed; generated files always included."""
        prefixes = [self.output_prefix]
        prefixes.extend(prefix for prefix in self.skip_prefixes if prefix not in prefixes)
        return prefixes


def load_config(config_path: Path) -> IfaceGenConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return IfaceGenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = IfaceGenConfig(root=root)

    suffix = _as_str(data.get("interface_suffix"))
    if suffix:
        config.interface_suffix = suffix
    prefix = _as_str(data.get("output_prefix"))
    if prefix:
        config.output_prefix = prefix
    if "skip_prefixes" in data:
        config.skip_prefixes = [
            prefix for prefix in _as_str_list(data.get("skip_prefixes")) if prefix
        ]
    extension = _as_str(data.get("extension"))
    if extension:
        config.extension = extension if extension.startswith(".") else f".{extension}"
    config.exclude_paths = _as_str_list(data.get("exclude_paths"))

    formatter_data = data.get("formatter")
    if isinstance(formatter_data, str):
        formatter_data = {"command": formatter_data}
    formatter_data = _as_dict(formatter_data)
    if formatter_data:
        command = _as_str(formatter_data.get("command"))
        if command is not None:
            command = command.lower()
            if command not in FORMATTER_CHOICES:
                raise ConfigError(
                    f"formatter.command must be one of {', '.join(FORMATTER_CHOICES)}; got {command!r}"
                )
            config.formatter.command = command
        max_passes = _as_int(formatter_data.get("max_passes"))
        if max_passes is not None:
            if max_passes < 1:
                raise ConfigError("formatter.max_passes must be at least 1")
            config.formatter.max_passes = max_passes

    policy = _as_str(data.get("on_parse_error"))
    if policy is not None:
        policy = policy.lower()
        if policy not in PARSE_ERROR_POLICIES:
            raise ConfigError(
                f"on_parse_error must be one of {', '.join(PARSE_ERROR_POLICIES)}; got {policy!r}"
            )
        config.on_parse_error = policy

    templates_dir = _as_str(data.get("templates_dir"))
    if templates_dir:
        config.templates_dir = root / templates_dir

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "FORMATTER_CHOICES",
    "FormatterConfig",
    "IfaceGenConfig",
    "PARSE_ERROR_POLICIES",
    "load_config",
]
