"""Tests for tag resolution: current, latest and pin-target tags."""

import logging

import pytest

from actpin.resolver import Tag, VersionStyle
from actpin.resolver.errors import (
    NoMatchingTag,
    NoResolvableVersion,
    NoTagsAvailable,
    UnclassifiableVersion,
)
from actpin.resolver.tags import find_pinned_tag, is_outdated, latest_tag, resolve_tags
from actpin.resolver.versions import (
    band_upper_bound,
    is_newer,
    parse_version,
    render_version,
    same_version,
)

from conftest import FIXTURE_TAGS, GITHUB_SCRIPT_SHA, sha


def tags(*names):
    """Tags whose SHAs are derived from their position, 'a', 'b', ..."""
    return [Tag(name, sha("abcdef0123456789"[i])) for i, name in enumerate(names)]


# ---------------------------------------------------------------------------
# Version helpers
# ---------------------------------------------------------------------------

class TestParseVersion:
    def test_pads_missing_components(self):
        v = parse_version("v4")
        assert (v.major, v.minor, v.patch) == (4, 0, 0)

    def test_prefix_optional(self):
        assert parse_version("1.2.3") == parse_version("v1.2.3")

    def test_prerelease(self):
        assert parse_version("v6.0.0-beta.1").prerelease == ("beta", "1")

    @pytest.mark.parametrize("text", ["main", "v1.2.3.4", "release-1", "", "vv1"])
    def test_rejects_non_versions(self, text):
        with pytest.raises(ValueError):
            parse_version(text)

    def test_build_metadata_ignored_for_equality(self):
        assert same_version(parse_version("v1.2.3+build.1"), parse_version("v1.2.3"))
        assert not same_version(parse_version("v1.2.3-rc.1"), parse_version("v1.2.3"))


class TestBands:
    def test_full_and_minor_bands_end_at_next_minor(self):
        v = parse_version("v1.2.3")
        assert str(band_upper_bound(v, VersionStyle.SEMVER_FULL)) == "1.3.0"
        assert str(band_upper_bound(v, VersionStyle.SEMVER_MINOR)) == "1.3.0"

    def test_major_band_ends_at_next_major(self):
        assert str(band_upper_bound(parse_version("v4"), VersionStyle.SEMVER_MAJOR)) == "5.0.0"

    def test_no_band_for_pinned(self):
        with pytest.raises(ValueError):
            band_upper_bound(parse_version("v1"), VersionStyle.PINNED)

    def test_is_newer_respects_granularity(self):
        latest = parse_version("v4.2.2")
        assert not is_newer(latest, parse_version("v4"), VersionStyle.SEMVER_MAJOR)
        assert is_newer(latest, parse_version("v4.1"), VersionStyle.SEMVER_MINOR)
        assert not is_newer(latest, parse_version("v4.2"), VersionStyle.SEMVER_MINOR)
        assert is_newer(latest, parse_version("v4.2.1"), VersionStyle.SEMVER_FULL)

    @pytest.mark.parametrize("style, prefix, expected", [
        (VersionStyle.SEMVER_FULL, "v", "v1.3.7"),
        (VersionStyle.SEMVER_MINOR, "v", "v1.3"),
        (VersionStyle.SEMVER_MAJOR, "v", "v1"),
        (VersionStyle.SEMVER_MAJOR, "", "1"),
    ])
    def test_render(self, style, prefix, expected):
        assert render_version(parse_version("v1.3.7"), style, prefix) == expected


# ---------------------------------------------------------------------------
# find_pinned_tag / latest_tag
# ---------------------------------------------------------------------------

class TestFindPinnedTag:
    def test_longest_name_wins(self):
        tag = find_pinned_tag(GITHUB_SCRIPT_SHA, FIXTURE_TAGS["actions/github-script"])
        assert tag.name == "v7.0.1"

    def test_case_insensitive(self):
        tag = find_pinned_tag(GITHUB_SCRIPT_SHA.upper(), FIXTURE_TAGS["actions/github-script"])
        assert tag.commit_sha == GITHUB_SCRIPT_SHA

    def test_equal_length_keeps_first(self):
        candidates = [Tag("v1.0", sha("a")), Tag("v1.x", sha("a"))]
        assert find_pinned_tag(sha("a"), candidates).name == "v1.0"

    def test_unknown_commit(self):
        with pytest.raises(NoMatchingTag):
            find_pinned_tag(sha("f"), FIXTURE_TAGS["actions/github-script"])


class TestLatestTag:
    def test_excludes_prereleases(self):
        assert latest_tag(FIXTURE_TAGS["actions/checkout"]).name == "v5.0.0"

    def test_order_independent(self):
        assert latest_tag(FIXTURE_TAGS["some-org/deploy-action"]).name == "v2.0.0"

    def test_skips_malformed_tags(self):
        assert latest_tag(tags("nightly", "v1.0.0", "latest")).name == "v1.0.0"

    def test_none_when_nothing_qualifies(self):
        assert latest_tag(tags("nightly", "v2.0.0-rc.1")) is None

    def test_equal_versions_keep_first(self):
        assert latest_tag(tags("v2", "v2.0.0")).name == "v2"


# ---------------------------------------------------------------------------
# resolve_tags
# ---------------------------------------------------------------------------

class TestResolveTags:
    def test_major_reference(self):
        res = resolve_tags(VersionStyle.SEMVER_MAJOR, "v4", FIXTURE_TAGS["actions/checkout"])
        assert res.current.name == "v4"
        assert res.latest.name == "v5.0.0"
        assert res.pin_target.name == "v4.2.2"

    def test_full_reference_band_is_patch_releases(self):
        res = resolve_tags(VersionStyle.SEMVER_FULL, "v3.8.1", FIXTURE_TAGS["actions/setup-node"])
        assert res.current.name == "v3.8.1"
        assert res.latest.name == "v4.0.0"
        assert res.pin_target.name == "v3.8.2"

    def test_minor_reference_pins_to_newest_patch(self):
        res = resolve_tags(VersionStyle.SEMVER_MINOR, "v1.2", tags("v1.2", "v1.2.7", "v1.3.0"))
        assert res.current.name == "v1.2"
        assert res.latest.name == "v1.3.0"
        assert res.pin_target.name == "v1.2.7"

    def test_band_never_goes_below_current(self):
        res = resolve_tags(
            VersionStyle.SEMVER_FULL, "v1.0.3",
            tags("v1.0.1", "v1.0.3", "v1.0.5", "v1.1.0"),
        )
        assert res.pin_target.name == "v1.0.5"

    def test_band_skips_prereleases(self):
        res = resolve_tags(VersionStyle.SEMVER_FULL, "v1.0.0", tags("v1.0.0", "v1.0.1-rc.1"))
        assert res.pin_target.name == "v1.0.0"

    def test_pin_target_is_current_when_band_is_empty(self):
        res = resolve_tags(VersionStyle.SEMVER_FULL, "v4.0.0", FIXTURE_TAGS["actions/setup-node"])
        assert res.pin_target.name == "v4.0.0"

    def test_pinned_reference(self):
        res = resolve_tags(VersionStyle.PINNED, GITHUB_SCRIPT_SHA, FIXTURE_TAGS["actions/github-script"])
        assert res.current.name == "v7.0.1"
        assert res.latest.name == "v7.1.0"
        assert res.pin_target == res.current

    def test_no_tags(self):
        with pytest.raises(NoTagsAvailable):
            resolve_tags(VersionStyle.SEMVER_MAJOR, "v1", [])

    def test_no_stable_tags(self):
        with pytest.raises(NoResolvableVersion):
            resolve_tags(VersionStyle.SEMVER_FULL, "v1.0.0-rc.1", tags("nightly", "v1.0.0-rc.1"))

    def test_untagged_commit_among_prereleases(self):
        with pytest.raises(NoMatchingTag):
            resolve_tags(VersionStyle.PINNED, sha("f"), tags("v1.0.0-rc.1", "v1.0.0-rc.2"))

    def test_invalid_prerelease_in_reference(self):
        with pytest.raises(UnclassifiableVersion):
            resolve_tags(VersionStyle.SEMVER_FULL, "v1.0.0-beta.01", tags("v1.0.0"))

    def test_version_not_tagged(self):
        with pytest.raises(NoMatchingTag):
            resolve_tags(VersionStyle.SEMVER_FULL, "v9.9.9", FIXTURE_TAGS["actions/setup-node"])

    def test_branch_style_rejected(self):
        with pytest.raises(ValueError):
            resolve_tags(VersionStyle.BRANCH, "main", FIXTURE_TAGS["actions/setup-node"])

    def test_malformed_tag_warns_once(self, caplog):
        with caplog.at_level(logging.WARNING, logger="actpin.resolver.tags"):
            res = resolve_tags(
                VersionStyle.SEMVER_FULL, "v1.0.0",
                tags("v1.0.0", "nightly", "latest", "v1.0.1"),
            )
        assert res.pin_target.name == "v1.0.1"
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "nightly" in warnings[0].getMessage()


# ---------------------------------------------------------------------------
# is_outdated
# ---------------------------------------------------------------------------

class TestIsOutdated:
    def test_branch_always_outdated(self):
        tag = Tag("v1.0.0", sha("a"))
        assert is_outdated(VersionStyle.BRANCH, "main", tag, tag) is True

    def test_major_not_outdated_by_minor_release(self):
        current = Tag("v4", sha("4"))
        assert is_outdated(VersionStyle.SEMVER_MAJOR, "v4", current, Tag("v4.2.2", sha("4"))) is False

    def test_major_outdated_by_major_release(self):
        current = Tag("v4", sha("4"))
        assert is_outdated(VersionStyle.SEMVER_MAJOR, "v4", current, Tag("v5.0.0", sha("5"))) is True

    def test_full_up_to_date(self):
        current = Tag("v4.0.0", sha("c"))
        assert is_outdated(VersionStyle.SEMVER_FULL, "v4.0.0", current, current) is False

    def test_pinned_compares_tag_versions(self):
        current = Tag("v7.0.1", GITHUB_SCRIPT_SHA)
        assert is_outdated(VersionStyle.PINNED, GITHUB_SCRIPT_SHA, current, Tag("v7.1.0", sha("8"))) is True
        assert is_outdated(VersionStyle.PINNED, GITHUB_SCRIPT_SHA, current, current) is False

    def test_pinned_to_non_version_tag(self):
        current = Tag("stable", sha("a"))
        assert is_outdated(VersionStyle.PINNED, sha("a"), current, Tag("v1.0.0", sha("b"))) is True


# ---------------------------------------------------------------------------
# End-to-end scenarios
# ---------------------------------------------------------------------------

class TestScenarios:
    def test_current_and_latest(self):
        tag_list = [Tag("v1.0.0", sha("1")), Tag("v1.1.0", sha("2"))]
        res = resolve_tags(VersionStyle.SEMVER_FULL, "v1.0.0", tag_list)
        assert res.current.commit_sha == sha("1")
        assert res.latest.name == "v1.1.0"

    def test_prerelease_never_latest(self):
        res = resolve_tags(VersionStyle.SEMVER_FULL, "v1.0.0", tags("v1.0.0", "v2.0.0-rc.1"))
        assert res.latest.name == "v1.0.0"

    def test_pin_target_stays_below_next_minor(self):
        res = resolve_tags(VersionStyle.SEMVER_FULL, "v1.0.0", tags("v1.0.0", "v1.0.5", "v1.1.0"))
        assert res.pin_target.name == "v1.0.5"
