"""
Tag resolution: reconcile a version expression against published tags.

Given the style of a reference, its raw version text and the full tag
list of the action's repository, work out:

  - the tag the reference currently points at,
  - the latest stable tag,
  - the newest stable tag inside the reference's compatibility band.

Tags whose names are not semantic versions are skipped, never fatal:
one odd tag must not block a whole repository.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from actpin.resolver.errors import (
    NoMatchingTag,
    NoResolvableVersion,
    NoTagsAvailable,
    UnclassifiableVersion,
)
from actpin.resolver.models import Tag, VersionStyle
from actpin.resolver.versions import (
    Version,
    band_upper_bound,
    is_newer,
    is_stable,
    parse_version,
    same_version,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagResolution:
    current: Tag
    latest: Tag
    pin_target: Tag


@dataclass(frozen=True)
class _VersionedTag:
    tag: Tag
    version: Version


def _versioned(tags: Sequence[Tag]) -> list[_VersionedTag]:
    """Parse every tag name, dropping the ones that are not semantic versions."""
    parsed = []
    skipped = []
    for tag in tags:
        try:
            parsed.append(_VersionedTag(tag, parse_version(tag.name)))
        except ValueError as e:
            logger.debug("Could not parse tag %r as a semantic version: %s", tag.name, e)
            skipped.append(tag.name)
    if skipped:
        logger.warning(
            "Skipped %d tag(s) that are not semantic versions: %s",
            len(skipped), ", ".join(skipped[:5]) + (", ..." if len(skipped) > 5 else ""),
        )
    return parsed


def find_pinned_tag(commit_sha: str, tags: Sequence[Tag]) -> Tag:
    """
    Find the tag for a commit SHA.

    Some projects (actions/github-script, for one) point several tags at
    the same commit, e.g. v7 and v7.0.1. The longest, most specific name
    wins; on equal length the first one seen is kept.
    """
    matches = [t for t in tags if t.commit_sha.lower() == commit_sha.lower()]
    if not matches:
        raise NoMatchingTag(f"pinned to a commit with no associated tag: {commit_sha}")
    if len(matches) > 1:
        logger.debug(
            "Commit %s matches %d tags: %s",
            commit_sha[:12], len(matches), [t.name for t in matches],
        )
    return max(matches, key=lambda t: len(t.name))


def _requested_version(raw_version: str) -> Version:
    try:
        return parse_version(raw_version)
    except ValueError as e:
        raise UnclassifiableVersion(f"not a valid semantic version: {raw_version!r} ({e})") from e


def _find_semver_tag(raw_version: str, versioned: Sequence[_VersionedTag]) -> _VersionedTag:
    requested = _requested_version(raw_version)
    for vt in versioned:
        if same_version(vt.version, requested):
            return vt
    raise NoMatchingTag(f"no tag matches version {raw_version}")


def find_latest(versioned: Sequence[_VersionedTag]) -> Optional[_VersionedTag]:
    """Greatest stable version; pre-releases never count as latest."""
    latest = None
    for vt in versioned:
        if not is_stable(vt.version):
            continue
        if latest is None or vt.version > latest.version:
            latest = vt
    return latest


def latest_tag(tags: Sequence[Tag]) -> Optional[Tag]:
    """The latest stable tag in `tags`, or None when no tag qualifies."""
    latest = find_latest(_versioned(tags))
    return latest.tag if latest else None


def _find_pin_target(
    style: VersionStyle,
    current: _VersionedTag,
    versioned: Sequence[_VersionedTag],
) -> Tag:
    upper = band_upper_bound(current.version, style)
    logger.debug("Compatibility band: >=%s <%s", current.version, upper)
    best = current
    for vt in versioned:
        if not is_stable(vt.version):
            continue
        if vt.version > best.version and current.version <= vt.version < upper:
            best = vt
    return best.tag


def resolve_tags(style: VersionStyle, raw_version: str, tags: Sequence[Tag]) -> TagResolution:
    """
    Resolve the current, latest and pin-target tags for one reference.

    Raises:
        NoTagsAvailable: If `tags` is empty.
        NoMatchingTag: If the raw version matches no tag.
        NoResolvableVersion: If no tag is a stable semantic version.
    """
    if not tags:
        raise NoTagsAvailable("repository has no tags")
    if style is VersionStyle.BRANCH:
        raise ValueError("branch references are resolved against the default branch")

    versioned = _versioned(tags)

    # The current tag is looked up first so a reference to nothing reports
    # NoMatchingTag whatever the rest of the tag list looks like
    if style is VersionStyle.PINNED:
        current_tag = find_pinned_tag(raw_version, tags)
        current = None
    elif style in (VersionStyle.SEMVER_FULL, VersionStyle.SEMVER_MINOR, VersionStyle.SEMVER_MAJOR):
        current = _find_semver_tag(raw_version, versioned)
        current_tag = current.tag
    else:
        raise ValueError(f"unknown version style: {style!r}")

    latest = find_latest(versioned)
    if latest is None:
        raise NoResolvableVersion("no stable semantic-version tags")

    if current is None:
        return TagResolution(current=current_tag, latest=latest.tag, pin_target=current_tag)
    return TagResolution(
        current=current_tag,
        latest=latest.tag,
        pin_target=_find_pin_target(style, current, versioned),
    )


def is_outdated(style: VersionStyle, raw_version: str, current: Tag, latest: Tag) -> bool:
    """
    Whether a newer release than the referenced one exists.

    Pinned references compare against the current tag's version (a tag
    name that is not a version is always worth a review). Semver
    references compare against the raw version as written, since 'v4'
    is deliberately looser than the 'v4.0.0' tag it resolves to. Branch
    references are always outdated: they exist to be replaced by a tag.
    """
    if style is VersionStyle.BRANCH:
        return True

    latest_version = parse_version(latest.name)

    if style is VersionStyle.PINNED:
        try:
            current_version = parse_version(current.name)
        except ValueError:
            return True
        return latest_version > current_version

    if style in (VersionStyle.SEMVER_FULL, VersionStyle.SEMVER_MINOR, VersionStyle.SEMVER_MAJOR):
        return is_newer(latest_version, _requested_version(raw_version), style)

    raise ValueError(f"unknown version style: {style!r}")
