"""Crawler settings assembled from defaults, YAML, environment and CLI.

Precedence, lowest to highest: built-in defaults, the optional YAML config
file, ``CRAWLCOPY_*`` environment variables, explicit command-line flags.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .extensions import DEFAULT_FILE_TYPES, DEFAULT_SEPARATOR
from .logging_utils import DEFAULT_LOG_FILE
from .utils import load_yaml_file, parse_env_bool
from .worker_pool import DEFAULT_WORKERS

DEFAULT_CSV_FILE = "output.csv"
ENV_PREFIX = "CRAWLCOPY_"

_PATH_KEYS = ("to_dir", "csv_path", "log_file")
_BOOL_KEYS = ("copy_files", "echo_files", "to_csv")
_ENV_KEYS = ("root_dir", "file_types", "to_dir", "copy_files", "echo_files", "to_csv", "workers")
SETTING_KEYS = ("root_dir", "file_types", "to_dir", "copy_files", "echo_files", "to_csv", "workers", "csv_path", "log_file")


def _default_to_dir() -> Path:
    return Path(tempfile.gettempdir())


@dataclass
class CrawlerSettings:
    # Kept as text so an unresolvable home directory stays "" instead of "."
    root_dir: str = ""
    file_types: str = DEFAULT_FILE_TYPES
    to_dir: Path = field(default_factory=_default_to_dir)
    copy_files: bool = False
    echo_files: bool = True
    to_csv: bool = False
    workers: int = DEFAULT_WORKERS
    csv_path: Path = Path(DEFAULT_CSV_FILE)
    log_file: Path = Path(DEFAULT_LOG_FILE)
    separator: str = DEFAULT_SEPARATOR

    def as_log_fields(self) -> dict[str, object]:
        return {
            "Root Directory": self.root_dir or "(unset)",
            "File Types": self.file_types,
            "Output Directory": self.to_dir,
            "Copy Files": self.copy_files,
            "Echo Files": self.echo_files,
            "Output To CSV": self.to_csv,
            "Workers": self.workers,
        }


def env_var_name(key: str) -> str:
    return f"{ENV_PREFIX}{key.upper()}"


def _coerce_bool(value: Any, *, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        parsed = parse_env_bool(value)
        if parsed is not None:
            return parsed
    raise ConfigError(f"'{field_name}' must be a boolean, got {value!r}")


def _coerce_workers(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"'workers' must be an integer, got {value!r}")
    try:
        workers = int(str(value).strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'workers' must be an integer, got {value!r}") from exc
    if workers < 1:
        raise ConfigError(f"'workers' must be at least 1, got {workers}")
    return workers


def _coerce_file_types(value: Any, separator: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return separator.join(value)
    raise ConfigError("'file_types' must be a string or a list of strings")


def _build_settings(data: Mapping[str, Any], *, default_root: str) -> CrawlerSettings:
    unknown = sorted(set(data) - set(SETTING_KEYS))
    if unknown:
        raise ConfigError(f"Unknown setting(s): {', '.join(unknown)}")

    settings = CrawlerSettings(root_dir=default_root)
    if "root_dir" in data:
        settings.root_dir = os.path.expanduser(str(data["root_dir"]))
    if "file_types" in data:
        settings.file_types = _coerce_file_types(data["file_types"], settings.separator)
    for key in _PATH_KEYS:
        if key in data:
            setattr(settings, key, Path(str(data[key])).expanduser())
    for key in _BOOL_KEYS:
        if key in data:
            setattr(settings, key, _coerce_bool(data[key], field_name=key))
    if "workers" in data:
        settings.workers = _coerce_workers(data["workers"])
    return settings


def _environment_values(environ: Mapping[str, str]) -> dict[str, str]:
    values: dict[str, str] = {}
    for key in _ENV_KEYS:
        raw = environ.get(env_var_name(key))
        if raw is not None:
            values[key] = raw
    return values


def load_settings(
    config_path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    *,
    default_root: str = "",
    environ: Mapping[str, str] | None = None,
) -> CrawlerSettings:
    """Resolve crawler settings from every configuration source.

    Args:
        config_path: Optional YAML file with top-level setting keys
        overrides: Command-line values; keys whose value is None are ignored
        default_root: Root directory used when no source sets one
        environ: Environment mapping, ``os.environ`` by default

    Returns:
        Validated CrawlerSettings

    Raises:
        ConfigError: if a source cannot be read or holds an invalid value
    """
    merged: dict[str, Any] = {}
    if config_path is not None:
        try:
            merged.update(load_yaml_file(config_path))
        except (OSError, ValueError) as exc:
            raise ConfigError(f"Unable to load config file {config_path}: {exc}") from exc

    merged.update(_environment_values(os.environ if environ is None else environ))
    if overrides:
        merged.update({key: value for key, value in overrides.items() if value is not None})

    return _build_settings(merged, default_root=default_root)
