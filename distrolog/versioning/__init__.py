"""
Semantic version helpers for distrolog.

Modules
-------
keys : module
    Go-style semantic version parsing and derived forms.

Public API
----------
SemVer : dataclass
    Parsed semantic version.
parse_semver : function
    Parse a "v"-prefixed version, returning None when invalid.
is_valid : function
    Check whether a string is a valid semantic version.
major_minor : function
    Return "vMAJOR.MINOR", raising InvalidVersionError when invalid.
trim_periods : function
    Remove dots from a version string for use in URL anchors.

Examples
--------
    >>> from distrolog.versioning import major_minor, trim_periods
    >>> major_minor("v3.25.1")
    'v3.25'
    >>> trim_periods("v3.25.1")
    'v3251'
"""

from .keys import SemVer, is_valid, major_minor, parse_semver, trim_periods

__all__ = ["SemVer", "is_valid", "major_minor", "parse_semver", "trim_periods"]
