"""
Unit tests for symgraph.components.symbol.version_resolver_comp module.

Tests SemVer parsing, ordering and npm-style constraint resolution.
"""

import pytest

from symgraph.components.symbol.version_resolver_comp import (
    bump_version,
    compare_semver,
    find_best_match,
    format_semver,
    is_compatible,
    is_newer,
    parse_constraint,
    parse_semver,
    satisfies,
    satisfies_constraint,
    sort_versions_asc,
    sort_versions_desc,
)
from symgraph.helpers.dto.symbol_dto import SemVer


def v(text: str) -> SemVer:
    parsed = parse_semver(text)
    assert parsed is not None, text
    return parsed


class TestParseSemver:
    """Tests for parse_semver and format_semver."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "text",
        ["0.0.0", "1.2.3", "10.20.30", "1.0.0-alpha", "1.0.0-beta.1", "1.0.0+build.5", "2.1.0-rc.2+sha.abc123"],
    )
    def test_round_trip(self, text: str) -> None:
        """Formatting a parsed version should reproduce the original string."""
        assert format_semver(v(text)) == text

    @pytest.mark.unit
    def test_parses_all_parts(self) -> None:
        """parse_semver should split triple, prerelease and build."""
        assert v("1.2.3-beta.1+build.5") == SemVer(1, 2, 3, "beta.1", "build.5")

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["", "1.2", "1.2.3.4", "a.b.c", "01.2.3", "1.02.3", "-1.2.3", "1.2.3-", "v1.2.3"])
    def test_invalid_returns_none(self, text: str) -> None:
        """Malformed versions should return None rather than raise."""
        assert parse_semver(text) is None

    @pytest.mark.unit
    def test_strips_whitespace(self) -> None:
        """Surrounding whitespace should be ignored."""
        assert parse_semver("  1.2.3 ") == SemVer(1, 2, 3)

    @pytest.mark.unit
    def test_negative_components_rejected_by_dto(self) -> None:
        """SemVer should refuse negative numbers."""
        with pytest.raises(ValueError):
            SemVer(-1, 0, 0)


class TestCompareSemver:
    """Tests for compare_semver ordering."""

    @pytest.mark.unit
    def test_numeric_ordering(self) -> None:
        """Triples should compare numerically, not lexically."""
        assert compare_semver(v("1.2.3"), v("1.10.0")) == -1
        assert compare_semver(v("2.0.0"), v("1.99.99")) == 1
        assert compare_semver(v("1.2.3"), v("1.2.3")) == 0

    @pytest.mark.unit
    def test_release_outranks_prerelease(self) -> None:
        """A release should outrank a prerelease with the same triple."""
        assert compare_semver(v("1.0.0-alpha"), v("1.0.0")) == -1
        assert compare_semver(v("1.0.0"), v("1.0.0-rc.1")) == 1

    @pytest.mark.unit
    def test_distinct_prereleases_are_unordered(self) -> None:
        """Two different prereleases on the same triple should compare as equal."""
        assert compare_semver(v("1.0.0-alpha.1"), v("1.0.0-alpha.2")) == 0

    @pytest.mark.unit
    def test_build_metadata_ignored(self) -> None:
        """Build metadata should not affect precedence."""
        assert compare_semver(v("1.0.0+a"), v("1.0.0+b")) == 0

    @pytest.mark.unit
    def test_sorting(self) -> None:
        """sort helpers should order by precedence."""
        versions = [v("1.2.0"), v("0.9.0"), v("1.10.0"), v("1.2.0-beta")]
        assert [format_semver(x) for x in sort_versions_asc(versions)] == ["0.9.0", "1.2.0-beta", "1.2.0", "1.10.0"]
        assert format_semver(sort_versions_desc(versions)[0]) == "1.10.0"


class TestParseConstraint:
    """Tests for parse_constraint and satisfies."""

    @pytest.mark.unit
    def test_exact(self) -> None:
        """An exact version should produce min == max with an inclusive bound."""
        r = parse_constraint("1.2.3")
        assert r.min == r.max == SemVer(1, 2, 3)
        assert r.max_inclusive is True
        assert satisfies(v("1.2.3"), r)
        assert not satisfies(v("1.2.4"), r)

    @pytest.mark.unit
    def test_caret_bounds(self) -> None:
        """^X.Y.Z should accept X.Y.Z <= v < (X+1).0.0."""
        r = parse_constraint("^1.2.0")
        assert r.min == SemVer(1, 2, 0)
        assert r.max == SemVer(2, 0, 0)
        assert r.max_inclusive is False
        assert satisfies(v("1.2.0"), r)
        assert satisfies(v("1.99.0"), r)
        assert not satisfies(v("1.1.9"), r)
        assert not satisfies(v("2.0.0"), r)

    @pytest.mark.unit
    def test_caret_matches_share_major(self) -> None:
        """Every version matched by a caret range should keep the same major."""
        r = parse_constraint("^3.1.4")
        candidates = [v(f"{ma}.{mi}.{pa}") for ma in range(2, 5) for mi in range(0, 4) for pa in range(0, 6)]
        for candidate in candidates:
            if satisfies(candidate, r):
                assert candidate.major == 3
                assert compare_semver(candidate, SemVer(3, 1, 4)) >= 0

    @pytest.mark.unit
    def test_tilde_bounds(self) -> None:
        """~X.Y.Z should accept X.Y.Z <= v < X.(Y+1).0."""
        r = parse_constraint("~1.2.3")
        assert r.max == SemVer(1, 3, 0)
        assert satisfies(v("1.2.3"), r)
        assert satisfies(v("1.2.99"), r)
        assert not satisfies(v("1.3.0"), r)
        assert not satisfies(v("1.2.2"), r)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("constraint", "version"),
        [
            ("^1.2.0", "2.0.0-alpha"),
            ("^1.2.0", "2.0.0-rc.1"),
            ("~1.2.0", "1.3.0-beta"),
            ("<2.0.0", "2.0.0-rc.1"),
        ],
    )
    def test_exclusive_bound_excludes_its_prereleases(self, constraint: str, version: str) -> None:
        """Prereleases of an exclusive upper bound lie outside the range."""
        assert not satisfies(v(version), parse_constraint(constraint))

    @pytest.mark.unit
    def test_caret_and_tilde_properties_with_prereleases(self) -> None:
        """Caret matches keep the major and tilde matches keep the minor, prereleases included."""
        candidates = [
            v(f"{ma}.{mi}.{pa}{pre}")
            for ma in range(1, 4)
            for mi in range(0, 4)
            for pa in range(0, 3)
            for pre in ("", "-alpha", "-rc.1")
        ]
        caret = parse_constraint("^2.1.0")
        tilde = parse_constraint("~2.1.0")
        for candidate in candidates:
            if satisfies(candidate, caret):
                assert candidate.major == 2
                assert compare_semver(candidate, SemVer(2, 1, 0)) >= 0
            if satisfies(candidate, tilde):
                assert (candidate.major, candidate.minor) == (2, 1)

    @pytest.mark.unit
    def test_inclusive_bound_keeps_lower_prereleases(self) -> None:
        """<=2.0.0 should still accept a prerelease of 2.0.0."""
        assert satisfies(v("2.0.0-rc.1"), parse_constraint("<=2.0.0"))

    @pytest.mark.unit
    @pytest.mark.parametrize("constraint", ["*", "x", " * "])
    def test_wildcard(self, constraint: str) -> None:
        """Wildcards should accept any version."""
        r = parse_constraint(constraint)
        assert satisfies(v("0.0.1"), r)
        assert satisfies(v("99.0.0-beta"), r)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("constraint", "version", "expected"),
        [
            (">=1.2.0", "1.2.0", True),
            (">=1.2.0", "1.1.9", False),
            (">1.2.0", "1.2.0", False),
            (">1.2.0", "1.2.1", True),
            ("<=2.0.0", "2.0.0", True),
            ("<2.0.0", "2.0.0", False),
            ("<2.0.0", "1.9.9", True),
            ("=1.0.0", "1.0.0", True),
            ("=1.0.0", "1.0.1", False),
        ],
    )
    def test_comparison_operators(self, constraint: str, version: str, expected: bool) -> None:
        """Comparison operators should bound the range as written."""
        assert satisfies(v(version), parse_constraint(constraint)) is expected

    @pytest.mark.unit
    @pytest.mark.parametrize("constraint", ["", "latest", "^", "~1.2", "^abc", ">=1", "1.2", "^1.x", "=>1.0.0"])
    def test_invalid_constraint_returns_none(self, constraint: str) -> None:
        """Unrecognized syntax should return None rather than raise."""
        assert parse_constraint(constraint) is None

    @pytest.mark.unit
    def test_satisfies_constraint_strings(self) -> None:
        """satisfies_constraint should accept strings and reject bad input."""
        assert satisfies_constraint("1.4.0", "^1.0.0")
        assert not satisfies_constraint("not-a-version", "*")
        assert not satisfies_constraint("1.4.0", "latest")


class TestFindBestMatch:
    """Tests for find_best_match."""

    @pytest.mark.unit
    def test_caret_picks_highest_match(self) -> None:
        """^1.2.0 over [1.0.0, 1.2.0, 1.2.5, 2.0.0] should pick 1.2.5."""
        versions = [v("1.0.0"), v("1.2.0"), v("1.2.5"), v("2.0.0")]
        assert find_best_match(versions, parse_constraint("^1.2.0")) == SemVer(1, 2, 5)

    @pytest.mark.unit
    def test_no_match_returns_none(self) -> None:
        """No satisfying version should return None."""
        assert find_best_match([v("1.0.0")], parse_constraint("^2.0.0")) is None

    @pytest.mark.unit
    def test_release_preferred_over_prerelease(self) -> None:
        """A release should win over a prerelease of the same triple."""
        versions = [v("1.3.0-beta"), v("1.3.0"), v("1.2.0")]
        assert find_best_match(versions, parse_constraint("^1.0.0")) == SemVer(1, 3, 0)

    @pytest.mark.unit
    def test_next_major_prerelease_not_picked(self) -> None:
        """A prerelease of the next major must not win a caret match."""
        versions = [v("1.0.0"), v("1.2.0"), v("1.2.5"), v("2.0.0-rc.1")]
        assert find_best_match(versions, parse_constraint("^1.2.0")) == SemVer(1, 2, 5)


class TestVersionOperations:
    """Tests for bump_version, is_compatible and is_newer."""

    @pytest.mark.unit
    def test_bump(self) -> None:
        """bump_version should reset lower components and drop qualifiers."""
        base = v("1.2.3-beta+b1")
        assert bump_version(base, "major") == SemVer(2, 0, 0)
        assert bump_version(base, "minor") == SemVer(1, 3, 0)
        assert bump_version(base, "patch") == SemVer(1, 2, 4)

    @pytest.mark.unit
    def test_bump_invalid_part(self) -> None:
        """An unknown part should raise ValueError."""
        with pytest.raises(ValueError, match="Invalid version part"):
            bump_version(v("1.0.0"), "build")  # type: ignore[arg-type]

    @pytest.mark.unit
    def test_compatible_and_newer(self) -> None:
        """Same-major versions are compatible; is_newer follows precedence."""
        assert is_compatible(v("1.0.0"), v("1.9.0"))
        assert not is_compatible(v("1.0.0"), v("2.0.0"))
        assert is_newer(v("1.0.1"), v("1.0.0"))
        assert not is_newer(v("1.0.0-rc.1"), v("1.0.0"))
