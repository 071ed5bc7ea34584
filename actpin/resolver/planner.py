"""
Rewrite planning: decide the text that replaces a resolved reference.

A commit SHA is never written without the tag name it came from as a
trailing comment, and updated version tags get the exact resolved tag
as a comment too, since 'v4' alone does not say which release it is.
"""

import logging
from typing import Optional

from actpin.resolver.errors import PlanningError
from actpin.resolver.models import ResolvedAction, RewriteMode, RewritePlan, Tag, VersionStyle
from actpin.resolver.versions import parse_version, render_version

logger = logging.getLogger(__name__)


def _require(tag: Optional[Tag], what: str, resolved: ResolvedAction) -> Tag:
    if tag is None:
        raise PlanningError(f"{resolved.reference} has no {what} tag to rewrite to")
    return tag


def _commit_plan(resolved: ResolvedAction, mode: RewriteMode, tag: Tag) -> RewritePlan:
    return RewritePlan(
        resolved=resolved,
        mode=mode,
        reference_text=f"{resolved.canonical_name}@{tag.commit_sha}",
        annotation=tag.name,
    )


def _is_ahead_of_latest(resolved: ResolvedAction, latest: Tag) -> bool:
    """Whether the current tag is newer than the latest stable one, e.g. a pre-release."""
    current = resolved.current_tag
    if current is None or current == latest:
        return False
    try:
        return parse_version(current.name) > parse_version(latest.name)
    except ValueError:
        return False


def plan_rewrite(resolved: ResolvedAction, mode: RewriteMode) -> RewritePlan:
    """
    Build the replacement for one resolved reference.

    UPDATE keeps the granularity the reference was written at ('v1.2'
    becomes 'v1.3', not 'v1.3.7'); PIN writes the latest tag's commit;
    FREEZE writes the commit of the newest tag inside the compatibility
    band. UPDATE and PIN never move a reference backwards: one already
    ahead of the latest stable tag keeps its version and only gains the
    tag comment.

    Raises:
        PlanningError: If the tag the mode needs is missing.
    """
    latest = _require(resolved.latest_tag, "latest", resolved)

    if mode is RewriteMode.FREEZE:
        target = _require(resolved.pin_target, "pin target", resolved)
        plan = _commit_plan(resolved, mode, target)
    elif _is_ahead_of_latest(resolved, latest):
        current = resolved.current_tag
        logger.debug("%s is ahead of latest %s, keeping it", resolved.reference, latest.name)
        if mode is RewriteMode.PIN:
            plan = _commit_plan(resolved, mode, current)
        else:
            plan = RewritePlan(
                resolved=resolved,
                mode=mode,
                reference_text=str(resolved.reference),
                annotation=current.name,
            )
    elif mode is RewriteMode.PIN or resolved.style is VersionStyle.PINNED:
        plan = _commit_plan(resolved, mode, latest)
    elif resolved.style is VersionStyle.BRANCH:
        plan = RewritePlan(
            resolved=resolved,
            mode=mode,
            reference_text=f"{resolved.canonical_name}@{latest.name}",
            annotation=latest.name,
        )
    elif resolved.style in (VersionStyle.SEMVER_FULL, VersionStyle.SEMVER_MINOR, VersionStyle.SEMVER_MAJOR):
        prefix = "v" if resolved.raw_version.startswith("v") else ""
        version = render_version(parse_version(latest.name), resolved.style, prefix)
        plan = RewritePlan(
            resolved=resolved,
            mode=mode,
            reference_text=f"{resolved.canonical_name}@{version}",
            annotation=latest.name,
        )
    else:
        raise PlanningError(f"unknown version style: {resolved.style!r}")

    logger.debug("Planned %s -> %s (%s)", resolved.reference, plan.replacement, mode.value)
    return plan
