# templates.py
# SPDX-License-Identifier: MIT
"""Output formats and placeholder templates for license reports.

A template is split by the ``$start`` and ``$end`` markers into a header, a
per-library body and a footer. Anything after ``$separator`` inside the body
is emitted between consecutive libraries. The body's ``$name``, ``$type`` and
``$text`` placeholders are filled per library, escaped for the output format.
"""

from __future__ import annotations

import json
import os
import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from xml.sax.saxutils import escape as xml_escape

from .discovery import Library
from .errors import FilesystemError
from .paths import expand_path

__all__ = [
    "Format",
    "Template",
]

_PLACEHOLDER_RE = re.compile(r"\$(name|type|text)")
_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


class Format(Enum):
    """Supported report formats."""

    JSON = "json"
    XML = "xml"
    TEXT = "text"

    @classmethod
    def parse(cls, value: str | None) -> Format | None:
        """Return the format named ``value`` (any case), else None."""
        if not value:
            return None
        lowered = value.strip().lower()
        for member in cls:
            if member.value == lowered:
                return member
        return None

    @classmethod
    def names(cls) -> list[str]:
        return [member.value for member in cls]

    @classmethod
    def infer_from_template(cls, text: str) -> Format:
        """Guess the format from the first non-blank character of a template."""
        head = text.lstrip()[:1]
        if head in ("{", "["):
            return cls.JSON
        if head == "<":
            return cls.XML
        return cls.TEXT

    @classmethod
    def infer_from_path(cls, path: str | os.PathLike[str]) -> Format | None:
        """Guess the format from an output file extension."""
        suffix = Path(path).suffix.lower().lstrip(".")
        if suffix in (cls.JSON.value, cls.XML.value):
            return cls(suffix)
        return None

    def escape(self, value: str) -> str:
        if self is Format.JSON:
            return json.dumps(value, ensure_ascii=False)[1:-1]
        if self is Format.XML:
            return xml_escape(value, _XML_ENTITIES)
        return value


_DEFAULT_TEMPLATES = {
    Format.TEXT: "$start$name ($type)\n\n$text$separator\n\n\n$end\n",
    Format.JSON: (
        "[\n"
        "$start  {\n"
        '    "name": "$name",\n'
        '    "type": "$type",\n'
        '    "text": "$text"\n'
        "  }$separator,\n"
        "$end\n"
        "]\n"
    ),
    Format.XML: (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        "<licenses>\n"
        "$start  <license>\n"
        "    <name>$name</name>\n"
        "    <type>$type</type>\n"
        "    <text>$text</text>\n"
        "  </license>$separator\n"
        "$end\n"
        "</licenses>\n"
    ),
}


@dataclass(frozen=True)
class Template:
    """A report template in its raw, placeholder-bearing form."""

    text: str

    @classmethod
    def default(cls, fmt: Format) -> Template:
        return cls(_DEFAULT_TEMPLATES[fmt])

    @classmethod
    def load(cls, path_or_template: str, base_dir: str | os.PathLike[str]) -> Template:
        """Use ``path_or_template`` verbatim if it contains ``$name``, else read it as a file.

        Raises:
            FilesystemError: If the template file cannot be read.
        """
        if "$name" in path_or_template:
            return cls(path_or_template)
        path = expand_path(path_or_template, base_dir)
        try:
            return cls(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            raise FilesystemError(f"Unable to read template file at {path}.") from exc

    def split(self, fmt: Format) -> tuple[str, str, str, str]:
        """Return ``(header, item, separator, footer)`` for this template."""
        header, marker, rest = self.text.partition("$start")
        if not marker:
            header, rest = "", self.text
        body, marker, footer = rest.rpartition("$end")
        if not marker:
            body, footer = rest, ""
        item, marker, separator = body.rpartition("$separator")
        if not marker:
            item, separator = body, ("," if fmt is Format.JSON else "")
        return header, item, separator, footer

    def render(self, libraries: Sequence[Library], fmt: Format) -> str:
        """Render ``libraries`` in order as ``header + separator.join(items) + footer``."""
        header, item, separator, footer = self.split(fmt)

        def _render_one(library: Library) -> str:
            values = {
                "name": fmt.escape(library.name),
                "type": fmt.escape(library.type_name),
                "text": fmt.escape(library.license_text),
            }
            return _PLACEHOLDER_RE.sub(lambda match: values[match.group(1)], item)

        return header + separator.join(_render_one(library) for library in libraries) + footer
