"""
Branch resolution: turn '@main' style references into a concrete tag.

Only the repository's default branch has a stable "latest" meaning, so
a reference to any other branch is refused rather than silently
followed. A resolvable branch reference collapses current, latest and
pin target onto the latest stable tag.
"""

import logging

from actpin.resolver.errors import (
    NonDefaultBranch,
    NoResolvableVersion,
    RepositoryUnavailable,
    TransportError,
)
from actpin.resolver.models import ActionReference
from actpin.resolver.source import TagSource
from actpin.resolver.tags import TagResolution, latest_tag

logger = logging.getLogger(__name__)


def resolve_branch(ref: ActionReference, source: TagSource) -> TagResolution:
    """
    Resolve a branch reference against its repository's default branch.

    Raises:
        RepositoryUnavailable: If repository metadata cannot be fetched.
        NonDefaultBranch: If the branch is not the default branch.
        TransportError: If the tags cannot be fetched.
        NoResolvableVersion: If the repository has no stable tag to move to.
    """
    try:
        repository = source.fetch_repository(ref.owner, ref.repo)
    except TransportError as e:
        raise RepositoryUnavailable(
            f"could not fetch repository {ref.owner}/{ref.repo}: {e}"
        ) from e

    if ref.raw_version != repository.default_branch:
        raise NonDefaultBranch(
            f"branch reference '{ref.raw_version}' does not target the default "
            f"branch '{repository.default_branch}' of {ref.owner}/{ref.repo}"
        )

    tags = source.fetch_tags(ref.owner, ref.repo)
    latest = latest_tag(tags) if tags else None
    if latest is None:
        raise NoResolvableVersion(
            f"cannot resolve branch reference {ref} to a version"
        )

    logger.debug("Branch reference %s resolves to %s", ref, latest.name)
    return TagResolution(current=latest, latest=latest, pin_target=latest)
