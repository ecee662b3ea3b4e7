# licenses.py
# SPDX-License-Identifier: MIT
"""
License-type detection for third-party license files.

Detection is a fixed-order scan over signature phrases: the text is
lowercased and whitespace-collapsed once, then each :class:`LicenseType` is
tried in declaration order and the first one with any matching phrase wins.
Texts that match nothing are "Unknown" (``None``).
"""

from __future__ import annotations

import re
from enum import Enum

from .log import get_logger

log = get_logger(__name__)

__all__ = [
    "LicenseType",
    "SIGNATURE_PHRASES",
    "UNKNOWN_LICENSE",
    "preprocess",
    "classify",
]

UNKNOWN_LICENSE = "Unknown"

_WHITESPACE_RE = re.compile(r"\s+")


class LicenseType(Enum):
    """Closed set of recognized license families.

    Declaration order is the match precedence used by :func:`classify`.
    """

    BSD = "BSD"
    MIT = "MIT"
    ISC = "ISC"
    ZLIB = "Zlib"
    APACHE = "Apache"

    @classmethod
    def parse(cls, value: str | None) -> LicenseType | None:
        """Return the variant whose tag equals ``value`` (any case), else None."""
        if not value:
            return None
        lowered = value.strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return None

    @property
    def phrases(self) -> tuple[str, ...]:
        return SIGNATURE_PHRASES[self]

    def matches(self, text: str) -> bool:
        """Return True if any signature phrase of this type occurs in ``text``."""
        return self._matches_preprocessed(preprocess(text))

    def _matches_preprocessed(self, text: str) -> bool:
        return any(phrase in text for phrase in _NORMALIZED_PHRASES[self])


SIGNATURE_PHRASES: dict[LicenseType, tuple[str, ...]] = {
    LicenseType.BSD: (
        "BSD License",
        "Redistribution and use in source and binary forms, with or without modification",
        'THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR',
    ),
    LicenseType.MIT: (
        "The MIT License",
        "Permission is hereby granted, free of charge, to any person",
        'THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR',
    ),
    LicenseType.ISC: (
        "Permission to use, copy, modify, and/or distribute this software for any",
    ),
    LicenseType.ZLIB: (
        "Altered source versions must be plainly marked as such, and must not be",
    ),
    LicenseType.APACHE: (
        "Apache License",
    ),
}


def preprocess(text: str) -> str:
    """Lowercase ``text`` and collapse every whitespace run to one space."""
    return _WHITESPACE_RE.sub(" ", text.lower())


# Phrases go through the same normalization as the texts they are matched
# against, which makes the substring test case-insensitive.
_NORMALIZED_PHRASES: dict[LicenseType, tuple[str, ...]] = {
    license_type: tuple(preprocess(phrase) for phrase in phrases)
    for license_type, phrases in SIGNATURE_PHRASES.items()
}


def classify(text: str) -> LicenseType | None:
    """Infer the license type of a license text.

    Args:
        text (str): Raw license text, any case or line wrapping.

    Returns:
        LicenseType | None: First type in declaration order with a matching
        signature phrase, or None when the text is not recognized.
    """
    normalized = preprocess(text)
    for license_type in LicenseType:
        if license_type._matches_preprocessed(normalized):
            log.debug("Classified license text as %s", license_type.value)
            return license_type
    log.debug("License text did not match any known license type")
    return None
