# __init__.py
# SPDX-License-Identifier: MIT
"""
Top-level package exports for :mod:`tribute`.

Tribute finds the third-party license files in a project, classifies them by
license family and renders an attribution report (text, JSON or XML). It can
also check that a previously exported report still names every library.

Public surface
--------------
- :func:`fetch_libraries` / :func:`fetch_libraries_for_arguments` walk a
  directory and return :class:`Library` records, sorted by name.
- :func:`classify` maps license text to a :class:`LicenseType` (or None).
- :func:`list_libraries`, :func:`check` and :func:`export` are the report
  operations behind the CLI commands of the same name.
- :func:`preprocess_arguments` turns a flat argv into an argument mapping.

Examples:
    Export a report for a checkout::

        >>> from tribute import export, preprocess_arguments
        >>> args = preprocess_arguments(["tribute", "export", "LICENSES.md", "--skip", "TestKit"])
        >>> export("path/to/project", args)
        'License data successfully written to .../LICENSES.md.'
"""

from __future__ import annotations

try:
    from importlib.metadata import version as _pkg_version

    __version__ = _pkg_version("tribute")
except Exception:  # PackageNotFoundError when running from a source tree
    __version__ = "0.0.0+unknown"

from .core.arguments import Argument, preprocess_arguments
from .core.config import TributeConfig, load_config_from_path
from .core.discovery import Library, fetch_libraries, fetch_libraries_for_arguments
from .core.errors import (
    ConfigError,
    FilesystemError,
    ManifestError,
    TributeError,
    UsageError,
    ValidationError,
)
from .core.licenses import LicenseType, classify
from .core.log import configure_logging, get_logger
from .core.matching import best_matches, edit_distance
from .core.report import check, export, list_libraries
from .core.templates import Format, Template

__all__ = [
    "__version__",
    "Argument",
    "preprocess_arguments",
    "TributeConfig",
    "load_config_from_path",
    "Library",
    "fetch_libraries",
    "fetch_libraries_for_arguments",
    "TributeError",
    "UsageError",
    "ConfigError",
    "FilesystemError",
    "ManifestError",
    "ValidationError",
    "LicenseType",
    "classify",
    "configure_logging",
    "get_logger",
    "best_matches",
    "edit_distance",
    "list_libraries",
    "check",
    "export",
    "Format",
    "Template",
]
