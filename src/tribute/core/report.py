# report.py
# SPDX-License-Identifier: MIT
"""Report operations built on library discovery: list, check and export.

Each operation takes the scanned directory and the preprocessed argument
mapping explicitly, plus an optional :class:`TributeConfig` whose lists are
merged underneath the command-line values.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Mapping, Sequence

from ..sinks.sinks import write_report
from .arguments import Argument, positional
from .config import TributeConfig
from .discovery import Library, fetch_libraries_for_arguments
from .errors import FilesystemError, UsageError, ValidationError
from .licenses import UNKNOWN_LICENSE
from .log import get_logger
from .matching import closest_match
from .paths import expand_path
from .templates import Format, Template

log = get_logger(__name__)

__all__ = [
    "CHECK_OK_MESSAGE",
    "list_libraries",
    "check",
    "export",
]

CHECK_OK_MESSAGE = "Licenses file is up-to-date."

# Positional index of the report path: argv is [program, command, path].
_REPORT_PATH_INDEX = 2
_TYPE_COLUMN_WIDTH = 7
_WHITESPACE_RE = re.compile(r"\s+")


def _effective_arguments(
    arguments: Mapping[Argument, Sequence[str]],
    config: TributeConfig | None,
) -> Mapping[Argument, Sequence[str]]:
    return config.merged_with(arguments) if config is not None else arguments


def _discover(
    directory: str | os.PathLike[str],
    arguments: Mapping[Argument, Sequence[str]],
    config: TributeConfig | None,
) -> list[Library]:
    cache = None
    if config is not None and config.package_cache_dir:
        # Relative cache paths are anchored like --exclude globs.
        cache = expand_path(config.package_cache_dir, directory)
    return fetch_libraries_for_arguments(directory, arguments, package_cache=cache)


def _lowered(arguments: Mapping[Argument, Sequence[str]], argument: Argument) -> list[str]:
    return [value.lower() for value in arguments.get(argument, ())]


def _validate_names(names: Iterable[str], libraries: Sequence[Library]) -> None:
    """Raise UsageError for the first name that matches no discovered library."""
    known = [library.name.lower() for library in libraries]
    for name in names:
        if name in known:
            continue
        closest = closest_match(name, known)
        if closest is not None:
            raise UsageError(f"Unknown library '{name}'. Did you mean '{closest}'?")
        raise UsageError(f"Unknown library '{name}'.")


def list_libraries(
    directory: str | os.PathLike[str],
    arguments: Mapping[Argument, Sequence[str]],
    config: TributeConfig | None = None,
) -> str:
    """Return a table of discovered libraries: name, license type, license path."""
    arguments = _effective_arguments(arguments, config)
    libraries = _discover(directory, arguments, config)
    name_width = max((len(library.name) for library in libraries), default=0)
    return "\n".join(
        f"{library.name.ljust(name_width)}  "
        f"{library.type_name.ljust(_TYPE_COLUMN_WIDTH)}  "
        f"{library.license_path}"
        for library in libraries
    )


def check(
    directory: str | os.PathLike[str],
    arguments: Mapping[Argument, Sequence[str]],
    config: TributeConfig | None = None,
) -> str:
    """Verify that an existing licenses file names every discovered library.

    Returns:
        str: :data:`CHECK_OK_MESSAGE` on success.

    Raises:
        UsageError: On an unknown ``--skip`` name or a missing report path.
        FilesystemError: If the report cannot be read.
        ValidationError: If a library is missing from the report.
    """
    arguments = _effective_arguments(arguments, config)
    skip = _lowered(arguments, Argument.SKIP)

    libraries = _discover(directory, arguments, config)
    _validate_names(skip, libraries)
    libraries = [library for library in libraries if library.name.lower() not in skip]

    report_arg = positional(arguments, _REPORT_PATH_INDEX)
    if report_arg is None:
        raise UsageError("Missing path to licenses file.")
    report_path = expand_path(report_arg, directory)
    try:
        report_text = report_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FilesystemError(f"Unable to read licenses file at {report_path}.") from exc

    normalized = _WHITESPACE_RE.sub(" ", report_text)
    for library in libraries:
        if library.name not in normalized:
            raise ValidationError(f"License for '{library.name}' is missing from licenses file.")
    log.info("Checked %d libraries against %s", len(libraries), report_path)
    return CHECK_OK_MESSAGE


def _resolve_format(raw_format: str | None) -> Format | None:
    if raw_format is None:
        return None
    fmt = Format.parse(raw_format)
    if fmt is None:
        closest = closest_match(raw_format, Format.names())
        if closest is not None:
            raise UsageError(f"Unsupported output format '{raw_format}'. Did you mean '{closest}'?")
        raise UsageError(f"Unsupported output format '{raw_format}'.")
    return fmt


def _bypass_flag_name(name: str) -> str:
    return (f'"{name}"' if " " in name else name).lower()


def export(
    directory: str | os.PathLike[str],
    arguments: Mapping[Argument, Sequence[str]],
    config: TributeConfig | None = None,
) -> str:
    """Render the license report, optionally writing it to a file.

    Returns:
        str: A confirmation message when an output path was given, otherwise
        the rendered report.

    Raises:
        UsageError: On unknown ``--allow``/``--skip`` names or an unsupported
            ``--format``.
        ValidationError: If a library has an unrecognized license and is
            neither allowed nor skipped.
        FilesystemError: If the template cannot be read or the output cannot
            be written.
    """
    arguments = _effective_arguments(arguments, config)
    allow = _lowered(arguments, Argument.ALLOW)
    skip = _lowered(arguments, Argument.SKIP)
    raw_format = next(iter(arguments.get(Argument.FORMAT, ())), None)
    explicit_format = _resolve_format(raw_format)

    output_arg = positional(arguments, _REPORT_PATH_INDEX)
    output_path = expand_path(output_arg, directory) if output_arg is not None else None

    template_arg = next(iter(arguments.get(Argument.TEMPLATE, ())), None)
    if template_arg is not None:
        template = Template.load(template_arg, directory)
    else:
        inferred = Format.infer_from_path(output_path) if output_path is not None else None
        template = Template.default(explicit_format or inferred or Format.TEXT)
    fmt = explicit_format or Format.infer_from_template(template.text)

    libraries = _discover(directory, arguments, config)
    _validate_names([*allow, *skip], libraries)

    accepted: list[Library] = []
    for library in libraries:
        lowered = library.name.lower()
        if lowered in skip:
            continue
        if lowered not in allow and library.license_type is None:
            flag_name = _bypass_flag_name(library.name)
            raise ValidationError(
                f"Unrecognized license at {library.license_path}. "
                f"Use '--allow {flag_name}' or '--skip {flag_name}' to bypass."
            )
        if library.license_type is None:
            log.debug("Allowing %s with %s license", library.name, UNKNOWN_LICENSE)
        accepted.append(library)

    rendered = template.render(accepted, fmt)
    if output_path is None:
        return rendered
    write_report(output_path, rendered)
    return f"License data successfully written to {output_path}."
