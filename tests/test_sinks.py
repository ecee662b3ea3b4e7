from __future__ import annotations

from pathlib import Path

import pytest

from tribute.core.errors import FilesystemError
from tribute.sinks.sinks import TextReportSink, write_report


def test_write_report_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "out" / "nested" / "LICENSES.txt"
    result = write_report(target, "LibA (MIT)\n")

    assert result == target
    assert target.read_text(encoding="utf-8") == "LibA (MIT)\n"
    assert not (target.parent / "LICENSES.txt.tmp").exists()


def test_write_report_replaces_existing_file(tmp_path: Path) -> None:
    target = tmp_path / "LICENSES.txt"
    target.write_text("old", encoding="utf-8")
    write_report(target, "new")
    assert target.read_text(encoding="utf-8") == "new"


def test_sink_keeps_newlines_verbatim(tmp_path: Path) -> None:
    target = tmp_path / "LICENSES.txt"
    write_report(target, "a\r\nb\n")
    assert target.read_bytes() == b"a\r\nb\n"


def test_failed_write_leaves_target_untouched(tmp_path: Path) -> None:
    target = tmp_path / "LICENSES.txt"
    target.write_text("previous", encoding="utf-8")

    with pytest.raises(RuntimeError):
        with TextReportSink(target) as sink:
            sink.write("partial")
            raise RuntimeError("boom")

    assert target.read_text(encoding="utf-8") == "previous"
    assert not (tmp_path / "LICENSES.txt.tmp").exists()


def test_discard_without_open_is_noop(tmp_path: Path) -> None:
    sink = TextReportSink(tmp_path / "LICENSES.txt")
    sink.discard()
    sink.close()
    assert not (tmp_path / "LICENSES.txt").exists()


def test_unwritable_destination_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "file.txt"
    blocker.write_text("x", encoding="utf-8")
    target = blocker / "LICENSES.txt"

    with pytest.raises(FilesystemError) as excinfo:
        write_report(target, "text")

    assert str(excinfo.value).startswith(f"Unable to write output to {target}. ")
