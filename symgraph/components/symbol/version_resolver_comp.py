"""
SemVer parsing, comparison and constraint resolution.

Pure functions over SemVer / VersionRange DTOs. Parsing a version returns
None on malformed input, and so does parsing a constraint; callers that
need an error (the symbol table service) raise InvalidConstraintError.
"""

from __future__ import annotations

import functools
import logging
import re
from collections.abc import Iterable
from typing import Literal

from symgraph.helpers.dto.symbol_dto import SemVer, VersionRange

logger = logging.getLogger(__name__)

_NUM = r"(0|[1-9]\d*)"
_IDENT = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"
SEMVER_RE = re.compile(rf"^{_NUM}\.{_NUM}\.{_NUM}(?:-({_IDENT}))?(?:\+({_IDENT}))?$")

WILDCARDS = ("*", "x")


# ----------------------------------------------------------------------
#  Parsing and formatting
# ----------------------------------------------------------------------
def parse_semver(text: str) -> SemVer | None:
    """
    Parse a SemVer string such as "1.2.3-beta.1+build.5".

    Returns:
        SemVer, or None if the text is not a valid version
    """
    match = SEMVER_RE.match(text.strip())
    if not match:
        return None
    major, minor, patch, prerelease, build = match.groups()
    return SemVer(int(major), int(minor), int(patch), prerelease, build)


def format_semver(version: SemVer) -> str:
    text = f"{version.major}.{version.minor}.{version.patch}"
    if version.prerelease:
        text += f"-{version.prerelease}"
    if version.build:
        text += f"+{version.build}"
    return text


def compare_semver(a: SemVer, b: SemVer) -> Literal[-1, 0, 1]:
    """
    Compare two versions.

    Ordering is lexicographic on (major, minor, patch). A release outranks a
    prerelease of the same triple. Two different prerelease strings on the
    same triple are left unordered and compare as 0; build metadata never
    takes part in precedence.

    Returns:
        -1 if a < b, 0 if equal (or unordered), 1 if a > b
    """
    if a.triple != b.triple:
        return -1 if a.triple < b.triple else 1
    if a.prerelease and not b.prerelease:
        return -1
    if b.prerelease and not a.prerelease:
        return 1
    return 0


# ----------------------------------------------------------------------
#  Constraints
# ----------------------------------------------------------------------
def _next_patch(version: SemVer) -> SemVer:
    return SemVer(version.major, version.minor, version.patch + 1)


def _operand(constraint: str, prefix: str) -> SemVer | None:
    return parse_semver(constraint[len(prefix) :])


def parse_constraint(text: str) -> VersionRange | None:
    """
    Parse an npm-style version constraint into a VersionRange.

    Supported forms:
        1.2.3    exact (min == max, inclusive)
        ^1.2.3   >=1.2.3 <2.0.0
        ~1.2.3   >=1.2.3 <1.3.0
        *, x     any version
        >=, >, <=, <, =  with a full version operand

    Returns:
        VersionRange, or None if the constraint syntax is not recognized
    """
    trimmed = text.strip()

    if trimmed in WILDCARDS:
        return VersionRange(constraint=trimmed)

    exact = parse_semver(trimmed)
    if exact is not None:
        return VersionRange(min=exact, max=exact, max_inclusive=True, constraint=trimmed)

    # Two-character operators first so ">=" is not read as ">"
    for prefix in ("^", "~", ">=", "<=", ">", "<", "="):
        if trimmed.startswith(prefix):
            break
    else:
        logger.debug(f"[version_resolver] Unknown constraint format: {text!r}")
        return None

    v = _operand(trimmed, prefix)
    if v is None:
        logger.debug(f"[version_resolver] Invalid {prefix} operand in constraint: {text!r}")
        return None

    if prefix == "^":
        return VersionRange(min=v, max=SemVer(v.major + 1, 0, 0), constraint=trimmed)
    if prefix == "~":
        return VersionRange(min=v, max=SemVer(v.major, v.minor + 1, 0), constraint=trimmed)
    if prefix == ">=":
        return VersionRange(min=v, constraint=trimmed)
    if prefix == "<=":
        return VersionRange(max=v, max_inclusive=True, constraint=trimmed)
    if prefix == ">":
        return VersionRange(min=_next_patch(v), constraint=trimmed)
    if prefix == "<":
        return VersionRange(max=v, constraint=trimmed)
    return VersionRange(min=v, max=v, max_inclusive=True, constraint=trimmed)


def satisfies(version: SemVer, version_range: VersionRange) -> bool:
    """
    Check whether a version lies inside a range.

    An exclusive upper bound excludes its whole numeric triple, prereleases
    included: 2.0.0-rc.1 does not satisfy ^1.2.0.
    """
    if version_range.constraint in WILDCARDS:
        return True

    if version_range.min is not None and compare_semver(version, version_range.min) < 0:
        return False

    upper = version_range.max
    if upper is not None:
        if version_range.max_inclusive:
            if compare_semver(version, upper) > 0:
                return False
        elif version.triple >= upper.triple:
            return False

    return True


def satisfies_constraint(version_text: str, constraint_text: str) -> bool:
    """
    String convenience over satisfies().

    Returns False when either the version or the constraint cannot be parsed.
    """
    version = parse_semver(version_text)
    version_range = parse_constraint(constraint_text)
    if version is None or version_range is None:
        return False
    return satisfies(version, version_range)


def find_best_match(versions: Iterable[SemVer], version_range: VersionRange) -> SemVer | None:
    """
    Return the highest version satisfying the range, or None if none qualify.
    """
    matching = [v for v in versions if satisfies(v, version_range)]
    if not matching:
        return None
    return sort_versions_desc(matching)[0]


# ----------------------------------------------------------------------
#  Version operations
# ----------------------------------------------------------------------
def bump_version(version: SemVer, part: Literal["major", "minor", "patch"]) -> SemVer:
    if part == "major":
        return SemVer(version.major + 1, 0, 0)
    if part == "minor":
        return SemVer(version.major, version.minor + 1, 0)
    if part == "patch":
        return SemVer(version.major, version.minor, version.patch + 1)
    raise ValueError(f"Invalid version part: {part}")


def is_compatible(a: SemVer, b: SemVer) -> bool:
    """Versions with the same major number are API-compatible."""
    return a.major == b.major


def is_newer(a: SemVer, b: SemVer) -> bool:
    return compare_semver(a, b) > 0


def sort_versions_desc(versions: Iterable[SemVer]) -> list[SemVer]:
    return sorted(versions, key=functools.cmp_to_key(compare_semver), reverse=True)


def sort_versions_asc(versions: Iterable[SemVer]) -> list[SemVer]:
    return sorted(versions, key=functools.cmp_to_key(compare_semver))
