# config.py
# SPDX-License-Identifier: MIT
"""Configuration for tribute runs.

A project may keep its standing ``--allow``/``--skip``/``--exclude`` lists,
template and format in a ``.tribute.toml`` (or ``.tribute.yml``) file at the
scanned root, or in any TOML/JSON/YAML file passed with ``--config``.
Values from the command line are appended to the configured lists; for
single-valued options the command line wins.
"""
from __future__ import annotations

import json
import tomllib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from .arguments import Argument, ArgumentMap
from .errors import ConfigError
from .log import DEFAULT_LOG_LEVEL

__all__ = [
    "DEFAULT_CONFIG_NAMES",
    "TributeConfig",
    "load_config_from_path",
    "find_default_config",
]

DEFAULT_CONFIG_NAMES = (".tribute.toml", ".tribute.yml", ".tribute.yaml")

_LIST_FIELDS = {
    "allow": Argument.ALLOW,
    "skip": Argument.SKIP,
    "exclude": Argument.EXCLUDE,
}
_SCALAR_FIELDS = {
    "template": Argument.TEMPLATE,
    "format": Argument.FORMAT,
}


def _as_string_list(key: str, value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence) and all(isinstance(item, str) for item in value):
        return list(value)
    raise ConfigError(f"Config option '{key}' must be a string or a list of strings.")


@dataclass(slots=True)
class TributeConfig:
    """Settings that can live in a config file.

    Attributes:
        allow (list[str]): Libraries accepted even with unrecognized licenses.
        skip (list[str]): Libraries left out of reports.
        exclude (list[str]): Globs (relative to the scanned root) excluded
            from discovery.
        template (str | None): Template text or path to a template file.
        format (str | None): Output format name (json, xml or text).
        package_cache_dir (str | None): Where resolved Swift packages are
            checked out. Defaults to Xcode's DerivedData.
        log_level (str): Level for the ``tribute`` logger.
    """
    allow: list[str] = field(default_factory=list)
    skip: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    template: Optional[str] = None
    format: Optional[str] = None
    package_cache_dir: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> TributeConfig:
        """Build a config from a mapping, rejecting unknown keys.

        Raises:
            ConfigError: On unknown keys or values of the wrong shape.
        """
        if not data:
            return cls()
        allowed = {f.name for f in fields(cls)}
        unknown = sorted(k for k in data if k not in allowed)
        if unknown:
            raise ConfigError(
                f"Unsupported config options: {', '.join(unknown)}. "
                f"Allowed keys: {', '.join(sorted(allowed))}."
            )
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key in _LIST_FIELDS:
                kwargs[key] = _as_string_list(key, value)
            elif value is None or isinstance(value, str):
                kwargs[key] = value
            else:
                raise ConfigError(f"Config option '{key}' must be a string.")
        return cls(**kwargs)

    @classmethod
    def from_json(cls, path: Path | str) -> TributeConfig:
        """Load a configuration from a JSON file."""
        try:
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ConfigError(f"Unable to read config file at {path}.") from exc
        if not isinstance(payload, Mapping):
            raise ConfigError(f"Config file at {path} must contain an object.")
        return cls.from_dict(payload)

    @classmethod
    def from_toml(cls, path: Path | str) -> TributeConfig:
        """Load a configuration from a TOML file.

        Keys may sit at the top level or under a ``[tribute]`` table.
        """
        try:
            data = tomllib.loads(Path(path).read_bytes().decode("utf-8"))
        except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(f"Unable to read config file at {path}.") from exc
        table = data.get("tribute", data)
        if not isinstance(table, Mapping):
            raise ConfigError(f"The [tribute] entry in {path} must be a table.")
        return cls.from_dict(table)

    @classmethod
    def from_yaml(cls, path: Path | str) -> TributeConfig:
        """Load a configuration from a YAML file (same layout as TOML)."""
        try:
            data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            raise ConfigError(f"Unable to read config file at {path}.") from exc
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigError(f"Config file at {path} must contain a mapping.")
        table = data.get("tribute", data)
        if not isinstance(table, Mapping):
            raise ConfigError(f"The 'tribute' entry in {path} must be a mapping.")
        return cls.from_dict(table)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable mapping of non-empty settings."""
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value in (None, []):
                continue
            data[f.name] = list(value) if isinstance(value, list) else value
        return data

    def merged_with(self, arguments: Mapping[Argument, Sequence[str]]) -> ArgumentMap:
        """Overlay command-line ``arguments`` on top of this config.

        Returns:
            ArgumentMap: New mapping; configured list values come first and
            command-line values are appended, while a command-line
            ``--template``/``--format`` replaces the configured one.
        """
        merged: ArgumentMap = {key: list(values) for key, values in arguments.items()}
        for name, argument in _LIST_FIELDS.items():
            configured = getattr(self, name)
            if configured:
                merged[argument] = [*configured, *merged.get(argument, [])]
        for name, argument in _SCALAR_FIELDS.items():
            configured = getattr(self, name)
            if configured is not None and not merged.get(argument):
                merged[argument] = [configured]
        return merged


def load_config_from_path(path: str | Path) -> TributeConfig:
    """Load a TributeConfig from a ``.toml``, ``.json`` or ``.yaml`` file.

    Raises:
        ConfigError: If the extension is unsupported or the file is invalid.
    """
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix == ".toml":
        return TributeConfig.from_toml(p)
    if suffix == ".json":
        return TributeConfig.from_json(p)
    if suffix in (".yml", ".yaml"):
        return TributeConfig.from_yaml(p)
    raise ConfigError(f"Unsupported config extension {p.suffix!r}; expected .toml, .json or .yaml.")


def find_default_config(directory: str | Path) -> Path | None:
    """Return the first of ``DEFAULT_CONFIG_NAMES`` present in ``directory``."""
    for name in DEFAULT_CONFIG_NAMES:
        candidate = Path(directory) / name
        if candidate.is_file():
            return candidate
    return None
