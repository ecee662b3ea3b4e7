# discovery.py
# SPDX-License-Identifier: MIT
"""Library discovery: find license files under a project tree.

The walk is split into small stages so each can be exercised on its own:

* :func:`iter_entries` enumerates non-hidden, non-excluded paths in a
  deterministic order.
* :func:`resolve_package_libraries` handles ``Package.resolved`` lockfiles by
  scanning the package cache once (never recursively).
* :func:`is_license_file` decides whether an entry holds license text.
* :func:`read_library` reads, trims and classifies one license file.

:func:`fetch_libraries` wires the stages together, keeps the first library
seen for each case-insensitive name, and returns the list sorted with
:func:`library_sort_key`.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from .arguments import Argument
from .errors import FilesystemError, ManifestError
from .licenses import UNKNOWN_LICENSE, LicenseType, classify
from .log import get_logger
from .manifests import (
    DEFAULT_PACKAGE_CACHE,
    RESOLVED_FILE_NAME,
    is_unresolved_manifest,
    load_pins,
    pin_name_filter,
)
from .paths import Glob, expand_glob, expand_path, standardize

log = get_logger(__name__)

__all__ = [
    "LICENSE_FILE_NAMES",
    "LICENSE_FILE_EXTENSIONS",
    "Library",
    "Entry",
    "library_sort_key",
    "iter_entries",
    "is_license_file",
    "read_library",
    "resolve_package_libraries",
    "fetch_libraries",
    "fetch_libraries_for_arguments",
]

LICENSE_FILE_NAMES = frozenset({"license", "licence"})
LICENSE_FILE_EXTENSIONS = frozenset({"", "text", "txt", "md"})

_DIGITS_RE = re.compile(r"(\d+)")


@dataclass(frozen=True)
class Library:
    """A third-party library and the license file it was found through.

    Attributes:
        name (str): Library name, taken from the license file's directory.
        license_path (str): Path of the license file relative to the scanned
            root, starting with a separator (e.g. ``/LibA/LICENSE``).
        license_type (LicenseType | None): Detected license family, or None
            when the text was not recognized.
        license_text (str): License text with surrounding whitespace removed.
    """

    name: str
    license_path: str
    license_type: LicenseType | None
    license_text: str

    @property
    def type_name(self) -> str:
        """Return the license tag, or ``Unknown``."""
        return self.license_type.value if self.license_type else UNKNOWN_LICENSE


@dataclass(frozen=True)
class Entry:
    """A path produced by the directory walk."""

    path: Path
    rel: str
    is_dir: bool


def library_sort_key(name: str) -> tuple:
    """Sort key giving case-insensitive, numeric-aware ordering.

    Digit runs compare as numbers, so ``Foo2`` sorts before ``Foo10``.
    """
    parts = _DIGITS_RE.split(name)
    key = tuple(int(part) if index % 2 else part.casefold() for index, part in enumerate(parts))
    return key, name


def _is_excluded(path: Path, excluding: Sequence[Glob]) -> bool:
    return any(glob.matches(path) for glob in excluding)


def iter_entries(root: str | os.PathLike[str], excluding: Sequence[Glob] = ()) -> Iterator[Entry]:
    """Yield every non-hidden entry under ``root``.

    Directories are walked top-down with names sorted case-insensitively in
    each directory, so the order is stable across platforms. Hidden names
    (leading ``.``) are skipped and hidden or excluded directories are not
    descended into.

    Args:
        root: Directory to walk; standardized before use.
        excluding: Globs whose matches are dropped.

    Yields:
        Entry: Files and directories with their root-relative path.

    Raises:
        FilesystemError: If any directory in the tree cannot be listed.
    """
    walk_root = standardize(root)
    root_text = os.fspath(walk_root)
    if not walk_root.is_dir():
        raise FilesystemError(f"Unable to process directory at {walk_root}.")

    def _on_error(exc: OSError) -> None:
        target = exc.filename or root_text
        raise FilesystemError(f"Unable to process directory at {target}.") from exc

    for dirpath, dirnames, filenames in os.walk(walk_root, topdown=True, onerror=_on_error):
        dirnames.sort(key=str.casefold)
        filenames.sort(key=str.casefold)
        dpath = Path(dirpath)

        for name in list(dirnames):
            subdir = dpath / name
            if name.startswith(".") or _is_excluded(subdir, excluding):
                dirnames.remove(name)
                continue
            yield Entry(path=subdir, rel=os.fspath(subdir)[len(root_text):], is_dir=True)

        for name in filenames:
            if name.startswith("."):
                continue
            fpath = dpath / name
            if _is_excluded(fpath, excluding):
                continue
            yield Entry(path=fpath, rel=os.fspath(fpath)[len(root_text):], is_dir=False)


def is_license_file(entry: Entry) -> bool:
    """Return True for regular files named like ``LICENSE``/``licence.md``."""
    if entry.is_dir:
        return False
    stem, ext = os.path.splitext(entry.path.name)
    if stem.lower() not in LICENSE_FILE_NAMES:
        return False
    if ext.lstrip(".").lower() not in LICENSE_FILE_EXTENSIONS:
        return False
    return entry.path.is_file()


def read_library(entry: Entry) -> Library:
    """Read and classify the license file behind ``entry``.

    Text is decoded as UTF-8 (a leading BOM is dropped). Older packages often
    ship Latin-1 license files, so bytes that are not valid UTF-8 are decoded
    as Latin-1 instead.

    Raises:
        FilesystemError: If the file cannot be read.
    """
    try:
        data = entry.path.read_bytes()
    except OSError as exc:
        raise FilesystemError(f"Unable to read license file at {entry.rel}.") from exc
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError:
        log.debug("License file %s is not UTF-8; decoding as latin-1", entry.rel)
        text = data.decode("latin-1")
    text = text.strip()
    return Library(
        name=entry.path.parent.name,
        license_path=entry.rel,
        license_type=classify(text),
        license_text=text,
    )


def resolve_package_libraries(
    resolved_file: Path,
    *,
    package_cache: str | os.PathLike[str] | None = None,
) -> list[Library]:
    """Return the cached libraries pinned by a ``Package.resolved`` file.

    The package cache is scanned with manifest resolution disabled, so a
    lockfile inside the cache is never followed. A missing cache yields no
    libraries.

    Raises:
        ManifestError: If the lockfile cannot be parsed.
    """
    accepted = pin_name_filter(load_pins(resolved_file))
    cache = standardize(package_cache if package_cache is not None else DEFAULT_PACKAGE_CACHE)
    if not cache.is_dir():
        log.debug("Package cache %s not found; no packages resolved for %s", cache, resolved_file)
        return []
    libraries = fetch_libraries(cache, include_packages=False)
    matched = [library for library in libraries if library.name.lower() in accepted]
    log.info("Resolved %d of %d pinned names from %s", len(matched), len(accepted), resolved_file)
    return matched


def fetch_libraries(
    root: str | os.PathLike[str],
    excluding: Sequence[Glob] = (),
    *,
    include_packages: bool = True,
    package_cache: str | os.PathLike[str] | None = None,
) -> list[Library]:
    """Discover the libraries whose license files live under ``root``.

    Args:
        root: Directory to scan.
        excluding: Exclusion globs, already anchored to a base directory.
        include_packages: Follow ``Package.resolved`` lockfiles into the
            package cache and reject unresolved ``Package.swift`` files.
        package_cache: Override for the package cache location.

    Returns:
        list[Library]: Unique (case-insensitive) libraries, sorted by
        :func:`library_sort_key`.

    Raises:
        FilesystemError: If a directory or license file cannot be read.
        ManifestError: If a lockfile is malformed or a manifest is unresolved.
    """
    libraries: list[Library] = []
    seen: set[str] = set()

    def _add(library: Library) -> None:
        libraries.append(library)
        seen.add(library.name.lower())

    for entry in iter_entries(root, excluding):
        if include_packages and not entry.is_dir:
            if entry.path.name == RESOLVED_FILE_NAME:
                for library in resolve_package_libraries(entry.path, package_cache=package_cache):
                    if library.name.lower() not in seen:
                        _add(library)
                continue
            if is_unresolved_manifest(entry.path, display_path=entry.rel):
                raise ManifestError(
                    f"Found unresolved Package.swift at {entry.rel}. "
                    "Run 'swift package resolve' to resolve dependencies."
                )
        if entry.path.parent.name.lower() in seen:
            continue
        if not is_license_file(entry):
            continue
        library = read_library(entry)
        log.debug("Found %s (%s) at %s", library.name, library.type_name, library.license_path)
        _add(library)

    libraries.sort(key=lambda library: library_sort_key(library.name))
    log.info("Discovered %d libraries under %s", len(libraries), standardize(root))
    return libraries


def fetch_libraries_for_arguments(
    directory: str | os.PathLike[str],
    arguments: Mapping[Argument, Sequence[str]],
    *,
    package_cache: str | os.PathLike[str] | None = None,
) -> list[Library]:
    """Discover libraries under ``directory`` honoring ``--exclude`` globs."""
    globs = [expand_glob(pattern, directory) for pattern in arguments.get(Argument.EXCLUDE, ())]
    return fetch_libraries(expand_path(".", directory), globs, package_cache=package_cache)
