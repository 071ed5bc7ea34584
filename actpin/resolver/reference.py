"""
Reference parsing and version-style classification.

Parses strings like 'actions/checkout@v4' or
'aws-actions/configure-aws-credentials/setup@main' into an
ActionReference, and decides which style the text after '@' is written in.
"""

import logging
import re

from actpin.resolver.errors import MalformedReference, UnclassifiableVersion
from actpin.resolver.models import ActionReference, VersionStyle

logger = logging.getLogger(__name__)

_PRE = r"(-[0-9A-Za-z.-]+)?"
_BUILD = r"(\+[0-9A-Za-z.-]+)?"

# A full SHA-1 hash is 40 hex characters
SHA1_PATTERN = re.compile(r"^[0-9a-fA-F]{40}$")
SEMVER_FULL_PATTERN = re.compile(rf"^v?(\d+)\.(\d+)\.(\d+){_PRE}{_BUILD}$")
SEMVER_MINOR_PATTERN = re.compile(rf"^v?(\d+)\.(\d+){_PRE}{_BUILD}$")
SEMVER_MAJOR_PATTERN = re.compile(rf"^v?(\d+){_PRE}{_BUILD}$")


def parse_reference(
    raw: str,
    file_path: str = "",
    line: int = 0,
    column: int = 0,
) -> ActionReference:
    """
    Split 'owner/repo[/subpath]@version' into its components.

    Raises:
        MalformedReference: If the text has no single '@' with content on
            both sides, or the path has fewer than two segments.
    """
    parts = raw.split("@")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise MalformedReference(f"expected owner/repo[/subpath]@version: {raw!r}")

    path, version = parts
    segments = path.split("/")
    if len(segments) < 2 or not segments[0] or not segments[1]:
        raise MalformedReference(f"expected owner/repo before '@': {raw!r}")

    ref = ActionReference(
        owner=segments[0],
        repo=segments[1],
        subpath="/".join(segments[2:]),
        raw_version=version,
        file_path=file_path,
        line=line,
        column=column,
    )
    logger.debug("Parsed reference %s (subpath=%r)", ref, ref.subpath)
    return ref


def classify_version(raw_version: str) -> VersionStyle:
    """
    Decide which version style a raw version string is written in.

    The checks run in priority order: a 40-character hex string is a
    commit, not a huge major version, and 'v4' is a major version, not a
    branch name.

    Raises:
        UnclassifiableVersion: If the string is empty or contains whitespace.
    """
    if SHA1_PATTERN.fullmatch(raw_version):
        return VersionStyle.PINNED
    if SEMVER_FULL_PATTERN.fullmatch(raw_version):
        return VersionStyle.SEMVER_FULL
    if SEMVER_MINOR_PATTERN.fullmatch(raw_version):
        return VersionStyle.SEMVER_MINOR
    if SEMVER_MAJOR_PATTERN.fullmatch(raw_version):
        return VersionStyle.SEMVER_MAJOR
    if raw_version and not any(c.isspace() for c in raw_version):
        return VersionStyle.BRANCH
    raise UnclassifiableVersion(f"cannot classify version string: {raw_version!r}")
