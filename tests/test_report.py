# test_report.py
# SPDX-License-Identifier: MIT
import json
import xml.etree.ElementTree as ET

import pytest

from tribute.core.arguments import preprocess_arguments
from tribute.core.config import TributeConfig
from tribute.core.errors import FilesystemError, UsageError, ValidationError
from tribute.core.report import CHECK_OK_MESSAGE, check, export, list_libraries

MIT = 'Permission is hereby granted, free of charge, to any person. THE SOFTWARE IS PROVIDED "AS IS".'
BSD = "Redistribution and use in source and binary forms, with or without modification, are permitted."


def _license(root, rel, text):
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "project"
    _license(root, "LibA/LICENSE", MIT)
    _license(root, "LibB/LICENCE.txt", "These are custom terms.")
    _license(root, "LibC/LICENSE.md", BSD)
    return root


def _args(*argv):
    return preprocess_arguments(["tribute", *argv])


def test_list_libraries_table(project):
    output = list_libraries(project, _args("list"))
    assert output.splitlines() == [
        "LibA  MIT      /LibA/LICENSE",
        "LibB  Unknown  /LibB/LICENCE.txt",
        "LibC  BSD      /LibC/LICENSE.md",
    ]


def test_list_libraries_empty(tmp_path):
    assert list_libraries(tmp_path, _args("list")) == ""


def test_export_rejects_unrecognized_license(project):
    with pytest.raises(ValidationError) as excinfo:
        export(project, _args("export"))
    assert str(excinfo.value) == (
        "Unrecognized license at /LibB/LICENCE.txt. Use '--allow libb' or '--skip libb' to bypass."
    )


def test_export_quotes_names_with_spaces(tmp_path):
    _license(tmp_path, "My Lib/LICENSE", "Custom.")
    with pytest.raises(ValidationError) as excinfo:
        export(tmp_path, _args("export"))
    assert "'--allow \"my lib\"' or '--skip \"my lib\"'" in str(excinfo.value)


def test_export_with_skip_renders_text(project):
    output = export(project, _args("export", "--skip", "libb"))
    assert output == f"LibA (MIT)\n\n{MIT}\n\n\nLibC (BSD)\n\n{BSD}\n"


def test_export_with_allow_includes_unknown(project):
    output = export(project, _args("export", "--allow", "LibB"))
    assert "LibB (Unknown)\n\nThese are custom terms." in output


def test_export_unknown_skip_name_suggests(project):
    with pytest.raises(UsageError) as excinfo:
        export(project, _args("export", "--skip", "liba2"))
    assert str(excinfo.value) == "Unknown library 'liba2'. Did you mean 'liba'?"


def test_export_unknown_allow_name_without_suggestion(project):
    with pytest.raises(UsageError) as excinfo:
        export(project, _args("export", "--allow", "zzz"))
    assert str(excinfo.value) == "Unknown library 'zzz'."


def test_export_json_format(project):
    output = export(project, _args("export", "--skip", "LibB", "--format", "json"))
    data = json.loads(output)
    assert [item["name"] for item in data] == ["LibA", "LibC"]
    assert data[0] == {"name": "LibA", "type": "MIT", "text": MIT}


def test_export_xml_format(project):
    output = export(project, _args("export", "--skip", "LibB", "--format", "XML"))
    root = ET.fromstring(output.encode("utf-8"))
    assert [node.findtext("type") for node in root] == ["MIT", "BSD"]


def test_export_unsupported_format(project):
    with pytest.raises(UsageError) as excinfo:
        export(project, _args("export", "--format", "jsn"))
    assert str(excinfo.value) == "Unsupported output format 'jsn'. Did you mean 'json'?"


def test_export_inline_template(project):
    output = export(project, _args("export", "--skip", "LibB", "--template", "$start$name:$type$separator;$end"))
    assert output == "LibA:MIT;LibC:BSD"


def test_export_template_file_infers_format(project):
    (project / "credits.json.tmpl").write_text('[$start"$name"$end]', encoding="utf-8")
    output = export(project, _args("export", "--skip", "LibB", "--template", "credits.json.tmpl"))
    assert json.loads(output) == ["LibA", "LibC"]


def test_export_writes_file_and_infers_format_from_extension(project):
    message = export(project, _args("export", "out/LICENSES.json", "--skip", "LibB"))
    target = project / "out" / "LICENSES.json"

    assert message == f"License data successfully written to {target}."
    assert [item["name"] for item in json.loads(target.read_text(encoding="utf-8"))] == ["LibA", "LibC"]


def test_export_uses_config_lists(project):
    config = TributeConfig(skip=["LibB"], format="json")
    data = json.loads(export(project, _args("export"), config))
    assert [item["name"] for item in data] == ["LibA", "LibC"]


def test_export_honors_exclude(project):
    output = export(project, _args("export", "--exclude", "LibB"))
    assert "LibB" not in output


def test_relative_package_cache_is_anchored_to_directory(tmp_path, monkeypatch):
    root = tmp_path / "work" / "project"
    _license(root / ".cache", "Dep/LICENSE", MIT)
    (root / "Package.resolved").write_text(
        json.dumps({"object": {"pins": [{"package": "Dep", "repositoryURL": "https://example.com/Dep.git"}]}}),
        encoding="utf-8",
    )
    elsewhere = tmp_path / "elsewhere" / "deeper"
    elsewhere.mkdir(parents=True)
    monkeypatch.chdir(elsewhere)

    output = list_libraries(root, _args("list"), TributeConfig(package_cache_dir=".cache"))

    assert output == "Dep  MIT      /Dep/LICENSE"


def test_check_up_to_date(project):
    (project / "LICENSES.txt").write_text("LibA\nLibB\nLibC\n", encoding="utf-8")
    assert check(project, _args("check", "LICENSES.txt")) == CHECK_OK_MESSAGE


def test_check_reports_missing_library(project):
    (project / "LICENSES.txt").write_text("LibA LibC", encoding="utf-8")
    with pytest.raises(ValidationError) as excinfo:
        check(project, _args("check", "LICENSES.txt"))
    assert str(excinfo.value) == "License for 'LibB' is missing from licenses file."


def test_check_is_case_sensitive_but_ignores_whitespace(tmp_path):
    _license(tmp_path, "src/My Lib/LICENSE", MIT)
    (tmp_path / "LICENSES.txt").write_text("My\n    Lib (MIT)", encoding="utf-8")
    assert check(tmp_path, _args("check", "LICENSES.txt")) == CHECK_OK_MESSAGE

    (tmp_path / "LICENSES.txt").write_text("my lib (MIT)", encoding="utf-8")
    with pytest.raises(ValidationError):
        check(tmp_path, _args("check", "LICENSES.txt"))


def test_check_with_skip(project):
    (project / "LICENSES.txt").write_text("LibA LibC", encoding="utf-8")
    assert check(project, _args("check", "LICENSES.txt", "--skip", "libb")) == CHECK_OK_MESSAGE


def test_check_missing_path(project):
    with pytest.raises(UsageError) as excinfo:
        check(project, _args("check"))
    assert str(excinfo.value) == "Missing path to licenses file."


def test_check_unreadable_report(project):
    with pytest.raises(FilesystemError) as excinfo:
        check(project, _args("check", "nope.txt"))
    assert str(excinfo.value) == f"Unable to read licenses file at {project / 'nope.txt'}."


def test_exported_report_passes_check(project):
    export(project, _args("export", "LICENSES.md", "--allow", "LibB"))
    assert check(project, _args("check", "LICENSES.md")) == CHECK_OK_MESSAGE
