# manifests.py
# SPDX-License-Identifier: MIT
"""Swift Package Manager manifest and lockfile helpers.

``Package.resolved`` pins the project's remote dependencies. Their license
files live in the package cache (Xcode's DerivedData by default), not in the
project tree, so discovery uses the pins to pick the matching libraries out
of a scan of that cache.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

from .errors import ManifestError
from .log import get_logger

log = get_logger(__name__)

__all__ = [
    "RESOLVED_FILE_NAME",
    "MANIFEST_FILE_NAME",
    "REMOTE_PACKAGE_MARKER",
    "DEFAULT_PACKAGE_CACHE",
    "Pin",
    "load_pins",
    "pin_name_filter",
    "resolved_path_for",
    "is_unresolved_manifest",
]

RESOLVED_FILE_NAME = "Package.resolved"
MANIFEST_FILE_NAME = "Package.swift"
REMOTE_PACKAGE_MARKER = ".package("

DEFAULT_PACKAGE_CACHE = Path("~/Library/Developer/Xcode/DerivedData")


@dataclass(frozen=True)
class Pin:
    """A single pinned dependency from ``Package.resolved``."""

    package: str
    repository_url: str

    def repository_name(self) -> str:
        """Return the last path segment of the repository URL without extension."""
        path = urlparse(self.repository_url).path or self.repository_url
        segment = PurePosixPath(path.rstrip("/")).name
        return PurePosixPath(segment).stem if segment else ""

    def names(self) -> tuple[str, ...]:
        """Return the lowercased names a cached package may appear under."""
        names = [self.package.lower()]
        repo = self.repository_name().lower()
        if repo:
            names.append(repo)
        return tuple(names)


def load_pins(path: str | os.PathLike[str]) -> list[Pin]:
    """Parse the pins out of a ``Package.resolved`` file.

    Args:
        path: Location of the lockfile.

    Returns:
        list[Pin]: Pins in file order.

    Raises:
        ManifestError: If the file cannot be read or does not have the
            ``{"object": {"pins": [...]}}`` shape.
    """
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        raw_pins = payload["object"]["pins"]
        pins = [
            Pin(package=str(entry["package"]), repository_url=str(entry["repositoryURL"]))
            for entry in raw_pins
        ]
    except (OSError, UnicodeDecodeError, ValueError, KeyError, TypeError) as exc:
        raise ManifestError(f"Unable to read Swift Package file at {path}.") from exc
    log.debug("Loaded %d pins from %s", len(pins), path)
    return pins


def pin_name_filter(pins: Iterable[Pin]) -> frozenset[str]:
    """Return the set of lowercased library names accepted for ``pins``."""
    return frozenset(name for pin in pins for name in pin.names())


def resolved_path_for(manifest: Path) -> Path:
    """Return the lockfile that sits next to a ``Package.swift``."""
    return manifest.with_suffix(".resolved")


def is_unresolved_manifest(path: Path, *, display_path: str | None = None) -> bool:
    """Return True for a ``Package.swift`` that declares remote packages but has no lockfile.

    Args:
        path (Path): Candidate file.
        display_path (str | None): Path shown in error messages; defaults to
            ``path``.

    Raises:
        ManifestError: If the manifest exists but cannot be read.
    """
    if path.name != MANIFEST_FILE_NAME:
        return False
    if resolved_path_for(path).exists():
        return False
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        shown = display_path or str(path)
        raise ManifestError(f"Unable to read Package.swift at {shown}.") from exc
    return REMOTE_PACKAGE_MARKER in text
