# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Semantic version utilities for distrolog.

This module is format-agnostic: it does NOT read artifacts. It only parses
version strings the way Go module tooling does ("v" prefix required,
"v1" and "v1.2" accepted as shorthands for "v1.0.0" and "v1.2.0") and derives
the pieces release-note links need.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from distrolog.exceptions import InvalidVersionError

# ----------------------------
# Parsed form
# ----------------------------


@dataclass(frozen=True)
class SemVer:
    """A parsed semantic version.

    Attributes:
        major: Major component as written (e.g., "3").
        minor: Minor component, "0" when the shorthand omitted it.
        patch: Patch component, "0" when the shorthand omitted it.
        prerelease: Prerelease suffix including the leading "-", or "".
        build: Build metadata including the leading "+", or "".
        short: True if minor or patch were omitted in the input.

    """

    major: str
    minor: str
    patch: str
    prerelease: str = ""
    build: str = ""
    short: bool = False

    def major_minor(self) -> str:
        """Return the "vMAJOR.MINOR" prefix."""
        return f"v{self.major}.{self.minor}"

    def canonical(self) -> str:
        """Return "vMAJOR.MINOR.PATCH[-PRERELEASE]" without build metadata."""
        return f"v{self.major}.{self.minor}.{self.patch}{self.prerelease}"


_NUM = r"(0|[1-9]\d*)"
_IDENT = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"
_SEMVER_RE = re.compile(
    rf"^v{_NUM}(?:\.{_NUM}(?:\.{_NUM})?)?(-{_IDENT})?(\+{_IDENT})?$"
)
# Numeric prerelease identifiers must not carry leading zeros.
_BAD_NUMERIC_IDENT = re.compile(r"(?:^|\.)0\d+(?:\.|$)")


def parse_semver(v: str) -> SemVer | None:
    """Parse a "v"-prefixed semantic version.

    Returns None if the string is not a valid version. Shorthand forms
    ("v1", "v1.2") are only valid without prerelease or build suffixes.
    """
    m = _SEMVER_RE.match(v)
    if not m:
        return None
    major, minor, patch, pre, build = m.groups()
    short = minor is None or patch is None
    if short and (pre or build):
        return None
    if pre and _BAD_NUMERIC_IDENT.search(pre[1:]):
        return None
    return SemVer(
        major=major,
        minor=minor or "0",
        patch=patch or "0",
        prerelease=pre or "",
        build=build or "",
        short=short,
    )


def is_valid(v: str) -> bool:
    """Return True if v is a valid semantic version."""
    return parse_semver(v) is not None


def major_minor(v: str) -> str:
    """Return the "vMAJOR.MINOR" prefix of a semantic version.

    Raises:
        InvalidVersionError: If v is not a valid semantic version.

    Example:
        ```python
        major_minor("v3.25.1")  # "v3.25"
        major_minor("v3")       # "v3.0"
        ```
    """
    parsed = parse_semver(v)
    if parsed is None:
        raise InvalidVersionError(f"version {v!r} is not valid")
    return parsed.major_minor()


def trim_periods(v: str) -> str:
    """Drop every "." from v ("v3.25.1" -> "v3251"), as used in doc anchors."""
    return v.replace(".", "")
