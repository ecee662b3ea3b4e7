# sinks.py
# SPDX-License-Identifier: MIT
"""Sinks for writing rendered license reports to disk."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Self, TextIO

from ..core.errors import FilesystemError
from ..core.log import get_logger

log = get_logger(__name__)

__all__ = ["TextReportSink", "write_report"]


class TextReportSink:
    """Write a text report through a temp file that replaces the target on close.

    A failed write leaves any existing report untouched.
    """

    def __init__(self, out_path: str | os.PathLike[str]):
        self._path = Path(out_path)
        self._fp: TextIO | None = None
        self._tmp_path: Path | None = None

    @property
    def path(self) -> Path:
        return self._path

    def open(self) -> None:
        """Create the temp file next to the destination."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._tmp_path = self._path.parent / f"{self._path.name}.tmp"
            self._fp = self._tmp_path.open("w", encoding="utf-8", newline="")
        except OSError as exc:
            self._tmp_path = None
            raise self._error(exc) from exc

    def write(self, text: str) -> None:
        assert self._fp is not None
        try:
            self._fp.write(text)
        except OSError as exc:
            raise self._error(exc) from exc

    def close(self) -> None:
        """Close the handle and move the temp file into place."""
        if not self._fp:
            return
        try:
            self._fp.close()
        finally:
            self._fp = None
        if self._tmp_path:
            try:
                os.replace(self._tmp_path, self._path)
            except OSError as exc:
                self.discard()
                raise self._error(exc) from exc
            self._tmp_path = None
            log.debug("Wrote report to %s", self._path)

    def discard(self) -> None:
        """Drop the temp file without touching the destination."""
        if self._fp:
            self._fp.close()
            self._fp = None
        if self._tmp_path:
            self._tmp_path.unlink(missing_ok=True)
            self._tmp_path = None

    def __enter__(self) -> Self:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.discard()
            return
        self.close()

    def _error(self, exc: OSError) -> FilesystemError:
        reason = exc.strerror or str(exc)
        return FilesystemError(f"Unable to write output to {self._path}. {reason}.")


def write_report(path: str | os.PathLike[str], text: str) -> Path:
    """Atomically write ``text`` to ``path`` and return the destination."""
    with TextReportSink(path) as sink:
        sink.write(text)
    return sink.path
