# test_config.py
# SPDX-License-Identifier: MIT
import json

import pytest

from tribute.core.arguments import Argument
from tribute.core.config import TributeConfig, find_default_config, load_config_from_path
from tribute.core.errors import ConfigError, UsageError


def test_from_dict_defaults():
    cfg = TributeConfig.from_dict(None)
    assert cfg.allow == [] and cfg.skip == [] and cfg.exclude == []
    assert cfg.template is None
    assert cfg.log_level == "WARNING"


def test_from_dict_accepts_strings_for_lists():
    cfg = TributeConfig.from_dict({"skip": "SwiftLint", "allow": ["A", "B"], "format": "json"})
    assert cfg.skip == ["SwiftLint"]
    assert cfg.allow == ["A", "B"]
    assert cfg.format == "json"


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ConfigError) as excinfo:
        TributeConfig.from_dict({"skipp": ["x"]})
    assert "skipp" in str(excinfo.value)
    # Config errors surface as usage errors in the CLI.
    assert isinstance(excinfo.value, UsageError)


@pytest.mark.parametrize("data", [{"skip": [1, 2]}, {"skip": 3}, {"template": ["a"]}])
def test_from_dict_rejects_wrong_shapes(data):
    with pytest.raises(ConfigError):
        TributeConfig.from_dict(data)


def test_load_toml_with_table(tmp_path):
    path = tmp_path / "tribute.toml"
    path.write_text('[tribute]\nskip = ["LibB"]\nexclude = ["Vendor"]\nlog_level = "DEBUG"\n', encoding="utf-8")
    cfg = load_config_from_path(path)
    assert cfg.skip == ["LibB"]
    assert cfg.exclude == ["Vendor"]
    assert cfg.log_level == "DEBUG"


def test_load_toml_top_level(tmp_path):
    path = tmp_path / "tribute.toml"
    path.write_text('allow = "Custom"\n', encoding="utf-8")
    assert load_config_from_path(path).allow == ["Custom"]


def test_load_json(tmp_path):
    path = tmp_path / "tribute.json"
    path.write_text(json.dumps({"format": "xml", "package_cache_dir": "/tmp/cache"}), encoding="utf-8")
    cfg = load_config_from_path(path)
    assert cfg.format == "xml"
    assert cfg.package_cache_dir == "/tmp/cache"


def test_load_yaml(tmp_path):
    path = tmp_path / "tribute.yml"
    path.write_text("tribute:\n  skip:\n    - LibB\n  template: '$name'\n", encoding="utf-8")
    cfg = load_config_from_path(path)
    assert cfg.skip == ["LibB"]
    assert cfg.template == "$name"


def test_empty_yaml_is_default(tmp_path):
    path = tmp_path / "tribute.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config_from_path(path) == TributeConfig()


@pytest.mark.parametrize(
    "name, content",
    [
        ("bad.toml", "skip = [\n"),
        ("bad.json", "{"),
        ("bad.yml", "skip: [a, b\n"),
        ("list.json", "[1, 2]"),
    ],
)
def test_invalid_files_raise_config_error(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config_from_path(path)


def test_unsupported_extension(tmp_path):
    with pytest.raises(ConfigError):
        load_config_from_path(tmp_path / "tribute.ini")


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError) as excinfo:
        load_config_from_path(tmp_path / "missing.toml")
    assert str(excinfo.value) == f"Unable to read config file at {tmp_path / 'missing.toml'}."


def test_find_default_config(tmp_path):
    assert find_default_config(tmp_path) is None
    (tmp_path / ".tribute.yml").write_text("skip: A\n")
    assert find_default_config(tmp_path) == tmp_path / ".tribute.yml"
    (tmp_path / ".tribute.toml").write_text('skip = "A"\n')
    assert find_default_config(tmp_path) == tmp_path / ".tribute.toml"


def test_merged_with_appends_lists_and_prefers_cli_scalars():
    cfg = TributeConfig(skip=["A"], exclude=["Vendor"], template="$name", format="json")
    arguments = {
        Argument.ANONYMOUS: ["tribute", "export"],
        Argument.SKIP: ["B"],
        Argument.FORMAT: ["xml"],
    }

    merged = cfg.merged_with(arguments)

    assert merged[Argument.SKIP] == ["A", "B"]
    assert merged[Argument.EXCLUDE] == ["Vendor"]
    assert merged[Argument.TEMPLATE] == ["$name"]
    assert merged[Argument.FORMAT] == ["xml"]
    assert merged[Argument.ANONYMOUS] == ["tribute", "export"]
    assert arguments[Argument.SKIP] == ["B"]


def test_to_dict_drops_empty_values():
    cfg = TributeConfig(skip=["A"])
    assert cfg.to_dict() == {"skip": ["A"], "log_level": "WARNING"}
    assert TributeConfig.from_dict(cfg.to_dict()) == cfg
