# paths.py
# SPDX-License-Identifier: MIT
"""Path expansion and exclusion globs anchored to a base directory.

Paths are standardized lexically (``.``/``..`` collapsed, ``~`` expanded)
without resolving symlinks. Traversal and glob matching both use this form,
so an exclusion written against the scanned root always sees the same
spelling of a path as the walker produces.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

__all__ = [
    "standardize",
    "expand_path",
    "expand_glob",
    "Glob",
]


def standardize(path: str | os.PathLike[str]) -> Path:
    """Return an absolute, lexically normalized version of ``path``."""
    text = os.path.expanduser(os.fspath(path))
    return Path(os.path.normpath(os.path.abspath(text)))


def expand_path(path: str | os.PathLike[str], base_dir: str | os.PathLike[str]) -> Path:
    """Resolve ``path`` against ``base_dir``.

    Args:
        path: Absolute path, ``~``-prefixed path, or path relative to
            ``base_dir``.
        base_dir: Directory that relative paths are anchored to.

    Returns:
        Path: Absolute, standardized path.
    """
    text = os.path.expanduser(os.fspath(path))
    if not os.path.isabs(text):
        text = os.path.join(os.fspath(standardize(base_dir)), text)
    return standardize(text)


def _translate(pattern: str) -> str:
    """Translate a ``/``-separated wildcard pattern into a regex body."""
    out: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "*":
            if pattern.startswith("**", i):
                i += 2
                if i < n and pattern[i] == "/":
                    # "**/" also matches zero directories
                    out.append("(?:.*/)?")
                    i += 1
                else:
                    out.append(".*")
                continue
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        elif ch == "[":
            end = pattern.find("]", i + 2 if pattern.startswith("[!", i) else i + 1)
            if end == -1:
                out.append(re.escape(ch))
            else:
                body = pattern[i + 1:end]
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append("[" + body.replace("\\", "\\\\") + "]")
                i = end
        else:
            out.append(re.escape(ch))
        i += 1
    return "".join(out)


@dataclass(frozen=True)
class Glob:
    """Compiled exclusion pattern bound to an absolute base.

    A glob matches a path when the pattern matches the whole path or any
    leading directory of it, so excluding a directory excludes its contents.
    """

    pattern: str
    regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        compiled = re.compile("^" + _translate(self.pattern) + "(?:/.*)?$")
        object.__setattr__(self, "regex", compiled)

    def matches(self, path: str | os.PathLike[str]) -> bool:
        """Return True if the standardized ``path`` falls under this glob."""
        return self.regex.match(standardize(path).as_posix()) is not None


def expand_glob(pattern: str, base_dir: str | os.PathLike[str]) -> Glob:
    """Anchor a wildcard ``pattern`` to ``base_dir`` and compile it."""
    return Glob(expand_path(pattern, base_dir).as_posix())
