# errors.py
# SPDX-License-Identifier: MIT
"""Exception hierarchy surfaced by tribute commands.

Every error is terminal for the current invocation. ``str(exc)`` is the
single user-facing sentence printed by the CLI.
"""

from __future__ import annotations

__all__ = [
    "TributeError",
    "UsageError",
    "ConfigError",
    "FilesystemError",
    "ManifestError",
    "ValidationError",
]


class TributeError(Exception):
    """Base class for all tribute failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class UsageError(TributeError):
    """Unknown command, flag, format or library name."""


class ConfigError(UsageError):
    """Invalid or unreadable configuration file."""


class FilesystemError(TributeError):
    """Unreadable directory or file, or a failed write."""


class ManifestError(TributeError):
    """Malformed or unresolved dependency manifest."""


class ValidationError(TributeError):
    """Discovered libraries disagree with the requested report."""
