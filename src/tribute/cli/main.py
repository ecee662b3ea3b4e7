# main.py
# SPDX-License-Identifier: MIT

from __future__ import annotations

import sys
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Sequence

from .. import __version__
from ..core.arguments import Argument, ArgumentMap, positional, preprocess_arguments
from ..core.config import TributeConfig, find_default_config, load_config_from_path
from ..core.errors import TributeError, UsageError
from ..core.log import configure_logging, get_logger
from ..core.matching import closest_match
from ..core.paths import expand_path
from ..core.report import check, export, list_libraries

log = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 70  # EX_SOFTWARE


class Command(Enum):
    """Top-level tribute commands, in help display order."""

    EXPORT = "export"
    LIST = "list"
    CHECK = "check"
    HELP = "help"
    VERSION = "version"

    @classmethod
    def parse(cls, value: str) -> Command | None:
        for member in cls:
            if member.value == value:
                return member
        return None

    @classmethod
    def names(cls) -> list[str]:
        return [member.value for member in cls]

    @property
    def summary(self) -> str:
        return _SUMMARIES[self]


_SUMMARIES = {
    Command.EXPORT: "Export license information for project",
    Command.LIST: "Display list of libraries and licenses found in project",
    Command.CHECK: "Check that exported license info is correct",
    Command.HELP: "Display general or command-specific help",
    Command.VERSION: "Display the current version of Tribute",
}

_EXCLUDE_HELP = """\
   --exclude    One or more directories to be excluded from the library search.
                Paths should be relative to the current directory, and may include
                wildcard/glob syntax."""

_SKIP_HELP = """\
   --skip       One or more libraries to be skipped. Use this for libraries that do
                not require attribution, or which are used in the build process but
                are not actually shipped to the end-user."""

_CONFIG_HELP = """\
   --config     Path to a TOML, JSON or YAML config file. Defaults to .tribute.toml
                (or .tribute.yml) in the current directory when present."""

_DETAILED_HELP = {
    Command.HELP: """\
   [command]  The command to display help for.""",
    Command.EXPORT: f"""\
   [filepath]   Path to the file that the licenses should be exported to. If omitted
                then the licenses will be written to stdout.

{_EXCLUDE_HELP}

{_SKIP_HELP}

   --allow      A list of libraries that should be included even if their licenses
                are not supported/recognized.

   --template   A template string or path to a template file to use for generating
                the licenses file. The template should contain one or more of the
                following placeholder strings:

                $name        The name of the library
                $type        The license type (e.g. MIT, Apache, BSD)
                $text        The text of the license itself
                $start       The start of the license template (after the header)
                $end         The end of the license template (before the footer)
                $separator   A delimiter to be included between each license

   --format     How the output should be formatted (json, xml or text). If omitted
                this will be inferred automatically from the template contents.

{_CONFIG_HELP}""",
    Command.CHECK: f"""\
   [filepath]   The path to the licenses file that will be compared against the
                libraries found in the project (required). An error will be returned
                if any libraries are missing from the file.

{_EXCLUDE_HELP}

{_SKIP_HELP}

{_CONFIG_HELP}""",
}


def _parse_command(value: str) -> Command:
    command = Command.parse(value)
    if command is None:
        closest = closest_match(value, Command.names())
        if closest is not None:
            raise UsageError(f"Unrecognized command '{value}'. Did you mean '{closest}'?")
        raise UsageError(f"Unrecognized command '{value}'.")
    return command


def get_help(topic: str | None = None) -> str:
    """Return the command overview, or detailed help for ``topic``."""
    if topic is None:
        width = max(len(name) for name in Command.names())
        rows = "\n".join(f"   {command.value.ljust(width)}   {command.summary}" for command in Command)
        return (
            "Available commands:\n\n"
            f"{rows}\n\n"
            "(Type 'tribute help [command]' for more information)"
        )
    command = _parse_command(topic)
    detailed = _DETAILED_HELP.get(command)
    if detailed is None:
        return command.summary
    return f"{command.summary}.\n\n{detailed}\n"


def load_config(directory: Path, arguments: ArgumentMap) -> TributeConfig:
    """Load ``--config`` if given, else a default config file in ``directory``."""
    explicit = arguments.get(Argument.CONFIG)
    if explicit:
        return load_config_from_path(expand_path(explicit[0], directory))
    if Argument.CONFIG in arguments:
        raise UsageError("Missing path after --config.")
    default = find_default_config(directory)
    if default is not None:
        log.debug("Using config file %s", default)
        return load_config_from_path(default)
    return TributeConfig()


def run(directory: str | Path, argv: Sequence[str]) -> str:
    """Run a tribute command and return its output text.

    Args:
        directory (str | Path): Project directory to scan; relative paths in
            arguments are resolved against it.
        argv (Sequence[str]): Full argument vector, program name first.

    Returns:
        str: Text to print on success.

    Raises:
        TributeError: On any failure.
    """
    args = list(argv)
    command = _parse_command(args[1] if len(args) > 1 else Command.HELP.value)
    return _dispatch(command, Path(directory), preprocess_arguments(args))


def _cmd_help(directory: Path, arguments: ArgumentMap) -> str:
    return get_help(positional(arguments, 2))


def _cmd_version(directory: Path, arguments: ArgumentMap) -> str:
    return __version__


def _cmd_report(operation: Callable[..., str]) -> Callable[[Path, ArgumentMap], str]:
    """Wrap a report operation so it runs with the loaded config and logging."""

    def _handler(directory: Path, arguments: ArgumentMap) -> str:
        config = load_config(directory, arguments)
        configure_logging(level=config.log_level)
        return operation(directory, arguments, config)

    return _handler


_HANDLERS: dict[Command, Callable[[Path, ArgumentMap], str]] = {
    Command.EXPORT: _cmd_report(export),
    Command.LIST: _cmd_report(list_libraries),
    Command.CHECK: _cmd_report(check),
    Command.HELP: _cmd_help,
    Command.VERSION: _cmd_version,
}


def _dispatch(command: Command, directory: Path, arguments: ArgumentMap) -> str:
    handler = _HANDLERS.get(command)
    if handler is None:
        raise UsageError(f"Unrecognized command '{command.value}'.")
    log.debug("Running %s in %s", command.value, directory)
    return handler(directory, arguments)


def main(argv: Optional[Sequence[str]] = None, *, directory: str | Path | None = None) -> int:
    """Entry point for the ``tribute`` console script.

    Args:
        argv (Sequence[str] | None): Arguments after the program name;
            defaults to ``sys.argv[1:]``.
        directory (str | Path | None): Project directory; defaults to the
            process working directory.

    Returns:
        int: 0 on success, 70 (EX_SOFTWARE) on failure.
    """
    args = ["tribute", *(sys.argv[1:] if argv is None else argv)]
    root = Path.cwd() if directory is None else Path(directory)
    try:
        print(run(root, args))
    except TributeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
