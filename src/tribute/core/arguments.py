# arguments.py
# SPDX-License-Identifier: MIT
"""Command-line argument preprocessing.

Tribute flags take lists of values (``--skip Foo Bar`` or ``--skip Foo,
Bar``), which argparse does not model well alongside fuzzy suggestions for
misspelled option names. :func:`preprocess_arguments` turns a flat argv into
a mapping from :class:`Argument` to the values that followed it.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from enum import Enum

from .errors import UsageError
from .matching import closest_match

__all__ = [
    "Argument",
    "ArgumentMap",
    "preprocess_arguments",
    "positional",
]


class Argument(Enum):
    """Named arguments accepted by tribute commands.

    ``ANONYMOUS`` collects positional values (including the program name and
    the command itself).
    """

    ANONYMOUS = ""
    ALLOW = "allow"
    SKIP = "skip"
    EXCLUDE = "exclude"
    TEMPLATE = "template"
    FORMAT = "format"
    CONFIG = "config"

    @classmethod
    def parse(cls, value: str) -> Argument | None:
        """Return the named argument spelled ``value``, else None."""
        for member in cls:
            if member is not cls.ANONYMOUS and member.value == value:
                return member
        return None

    @classmethod
    def names(cls) -> list[str]:
        return [member.value for member in cls if member is not cls.ANONYMOUS]


ArgumentMap = dict[Argument, list[str]]


def preprocess_arguments(args: Iterable[str]) -> ArgumentMap:
    """Group a flat argv into values per :class:`Argument`.

    ``--name`` selects a named argument, ``-x`` selects the first argument
    whose name starts with ``x``. Other tokens are appended to the current
    selection (``ANONYMOUS`` until a flag is seen); one trailing comma is
    dropped so ``--skip a, b`` works.

    Raises:
        UsageError: For unknown long options or short flags.
    """
    named: ArgumentMap = {}
    current = Argument.ANONYMOUS
    for arg in args:
        if arg.startswith("--"):
            key = arg[2:]
            argument = Argument.parse(key)
            if argument is None:
                match = closest_match(key, Argument.names())
                if match is None:
                    raise UsageError(f"Unknown option --{key}.")
                raise UsageError(f"Unknown option --{key}. Did you mean --{match}?")
            current = argument
            named.setdefault(argument, [])
            continue
        if arg.startswith("-") and arg != "-":
            flag = arg[1:]
            argument = next(
                (member for member in Argument if member is not Argument.ANONYMOUS and member.value.startswith(flag)),
                None,
            )
            if argument is None:
                raise UsageError(f"Unknown flag -{flag}.")
            current = argument
            named.setdefault(argument, [])
            continue
        if arg.endswith(",") and arg != ",":
            arg = arg[:-1]
        named.setdefault(current, []).append(arg)
    return named


def positional(arguments: Mapping[Argument, Sequence[str]], index: int) -> str | None:
    """Return the positional value at ``index`` (argv-style), if present."""
    values = arguments.get(Argument.ANONYMOUS, ())
    return values[index] if len(values) > index else None
