"""
Semantic-version helpers on top of the semantic_version library.

Tag names and version expressions in workflows are looser than strict
SemVer: they may carry a 'v' prefix and omit the minor or patch
component. parse_version accepts those forms and pads the missing
components with zero, so 'v4' and '4.0.0' compare equal.
"""

import re

import semantic_version

from actpin.resolver.models import VersionStyle

Version = semantic_version.Version

_VERSION_PATTERN = re.compile(
    r"v?(\d+)(?:\.(\d+))?(?:\.(\d+))?"
    r"(?:-([0-9A-Za-z.-]+))?"
    r"(?:\+([0-9A-Za-z.-]+))?"
)


def parse_version(text: str) -> Version:
    """
    Parse a tag name or version expression into a Version.

    Raises:
        ValueError: If the text is not a (possibly partial) semantic version.
    """
    match = _VERSION_PATTERN.fullmatch(text)
    if not match:
        raise ValueError(f"not a semantic version: {text!r}")
    major, minor, patch, prerelease, build = match.groups()
    return Version(
        major=int(major),
        minor=int(minor or 0),
        patch=int(patch or 0),
        prerelease=tuple(prerelease.split(".")) if prerelease else (),
        build=tuple(build.split(".")) if build else (),
    )


def same_version(a: Version, b: Version) -> bool:
    """Component-wise equality, ignoring build metadata as SemVer requires."""
    return (a.major, a.minor, a.patch, a.prerelease) == (b.major, b.minor, b.patch, b.prerelease)


def is_stable(version: Version) -> bool:
    return not version.prerelease


def band_upper_bound(version: Version, style: VersionStyle) -> Version:
    """Exclusive upper bound of the compatibility band starting at `version`."""
    if style in (VersionStyle.SEMVER_FULL, VersionStyle.SEMVER_MINOR):
        return version.next_minor()
    if style is VersionStyle.SEMVER_MAJOR:
        return version.next_major()
    raise ValueError(f"no compatibility band for style {style.value!r}")


def is_newer(candidate: Version, requested: Version, style: VersionStyle) -> bool:
    """
    Whether `candidate` is newer than a requested version, compared at the
    granularity the request was written at: 'v1.2' is only superseded by a
    1.3 or later release, and 'v4' only by a 5.x release.
    """
    if style is VersionStyle.SEMVER_MAJOR:
        return candidate.major > requested.major
    if style is VersionStyle.SEMVER_MINOR:
        return (candidate.major, candidate.minor) > (requested.major, requested.minor)
    return candidate > requested


def render_version(version: Version, style: VersionStyle, prefix: str = "v") -> str:
    """Render `version` at the granularity of `style`, e.g. 'v1.3' for SEMVER_MINOR."""
    if style is VersionStyle.SEMVER_FULL:
        return f"{prefix}{version.major}.{version.minor}.{version.patch}"
    if style is VersionStyle.SEMVER_MINOR:
        return f"{prefix}{version.major}.{version.minor}"
    if style is VersionStyle.SEMVER_MAJOR:
        return f"{prefix}{version.major}"
    raise ValueError(f"cannot render a version in style {style.value!r}")
