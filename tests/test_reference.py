"""Tests for reference parsing and version-style classification."""

import pytest

from actpin.resolver import VersionStyle
from actpin.resolver.errors import MalformedReference, UnclassifiableVersion
from actpin.resolver.reference import classify_version, parse_reference


# ---------------------------------------------------------------------------
# parse_reference
# ---------------------------------------------------------------------------

class TestParseReference:
    def test_standard_ref(self):
        ref = parse_reference("actions/checkout@v4")
        assert ref.owner == "actions"
        assert ref.repo == "checkout"
        assert ref.subpath == ""
        assert ref.raw_version == "v4"
        assert ref.canonical_name == "actions/checkout"

    def test_subpath_ref(self):
        ref = parse_reference("aws-actions/configure-aws-credentials/setup@v1.0.0")
        assert ref.owner == "aws-actions"
        assert ref.repo == "configure-aws-credentials"
        assert ref.subpath == "setup"
        assert ref.canonical_name == "aws-actions/configure-aws-credentials/setup"

    def test_deep_subpath_ref(self):
        ref = parse_reference("owner/repo/path/to/action@main")
        assert ref.subpath == "path/to/action"
        assert ref.canonical_name == "owner/repo/path/to/action"

    def test_canonical_name_excludes_version(self):
        ref = parse_reference("actions/checkout@v4.1.0")
        assert "@" not in ref.canonical_name
        assert str(ref) == "actions/checkout@v4.1.0"

    def test_position_recorded(self):
        ref = parse_reference("actions/checkout@v4", "ci.yml", 8, 15)
        assert ref.location == "ci.yml:8:15"

    def test_is_immutable(self):
        ref = parse_reference("actions/checkout@v4")
        with pytest.raises(AttributeError):
            ref.raw_version = "v5"

    @pytest.mark.parametrize("raw", [
        "actions/checkout",
        "actions/checkout@",
        "@v4",
        "actions/checkout@v4@v5",
        "checkout@v4",
        "/checkout@v4",
        "actions/@v4",
    ])
    def test_malformed(self, raw):
        with pytest.raises(MalformedReference):
            parse_reference(raw)


# ---------------------------------------------------------------------------
# classify_version
# ---------------------------------------------------------------------------

class TestClassifyVersion:
    @pytest.mark.parametrize("raw", [
        "af513c7a016048ae468971c52ed77d9562c7c819",
        "AF513C7A016048AE468971C52ED77D9562C7C819",
        "1" * 40,
    ])
    def test_pinned(self, raw):
        assert classify_version(raw) is VersionStyle.PINNED

    @pytest.mark.parametrize("raw, expected", [
        ("v1.2.3", VersionStyle.SEMVER_FULL),
        ("1.2.3", VersionStyle.SEMVER_FULL),
        ("v1.2.3-rc.1", VersionStyle.SEMVER_FULL),
        ("v1.2.3+build.5", VersionStyle.SEMVER_FULL),
        ("v1.2", VersionStyle.SEMVER_MINOR),
        ("v1.2-beta", VersionStyle.SEMVER_MINOR),
        ("v1", VersionStyle.SEMVER_MAJOR),
        ("4", VersionStyle.SEMVER_MAJOR),
    ])
    def test_semver(self, raw, expected):
        assert classify_version(raw) is expected

    @pytest.mark.parametrize("raw", [
        "main",
        "master",
        "develop",
        "feature/new-thing",
        "release-2024",
        "v1.2.3.4",
        "a" * 39,
        "a" * 41,
        "g" * 40,
    ])
    def test_branch(self, raw):
        assert classify_version(raw) is VersionStyle.BRANCH

    @pytest.mark.parametrize("raw", ["", "two words", "v1 ", "main\n", "\t"])
    def test_unclassifiable(self, raw):
        with pytest.raises(UnclassifiableVersion):
            classify_version(raw)

    def test_bare_numeral_is_not_a_branch(self):
        assert classify_version("v4") is VersionStyle.SEMVER_MAJOR

    def test_forty_digit_number_is_a_commit(self):
        assert classify_version("1234567890" * 4) is VersionStyle.PINNED
