"""
Resolver: the single entry point from a raw `uses:` value to a
ResolvedAction.

    parse_reference -> classify_version -> resolve_branch | resolve_tags

The resolver owns no state beyond the tag source it is given; caching
across references is the source's business.
"""

import logging
import time
from typing import Iterable

from actpin.resolver.branch import resolve_branch
from actpin.resolver.errors import ResolutionError
from actpin.resolver.models import ResolutionFailure, ResolvedAction, UsesEntry, VersionStyle
from actpin.resolver.reference import classify_version, parse_reference
from actpin.resolver.source import TagSource
from actpin.resolver.tags import is_outdated, resolve_tags

logger = logging.getLogger(__name__)


class Resolver:
    """Resolves action references against a tag source."""

    def __init__(self, source: TagSource):
        self.source = source

    def resolve(
        self,
        raw: str,
        file_path: str = "",
        line: int = 0,
        column: int = 0,
    ) -> ResolvedAction:
        """
        Resolve one raw reference like 'actions/checkout@v4'.

        Raises:
            ResolutionError: Any of its subclasses, when the reference
                cannot be resolved.
        """
        ref = parse_reference(raw, file_path=file_path, line=line, column=column)
        style = classify_version(ref.raw_version)
        logger.debug("Resolving %s (style=%s)", ref, style.value)

        if style is VersionStyle.BRANCH:
            resolution = resolve_branch(ref, self.source)
        else:
            tags = self.source.fetch_tags(ref.owner, ref.repo)
            resolution = resolve_tags(style, ref.raw_version, tags)

        return ResolvedAction(
            reference=ref,
            style=style,
            current_tag=resolution.current,
            latest_tag=resolution.latest,
            pin_target=resolution.pin_target,
            outdated=is_outdated(style, ref.raw_version, resolution.current, resolution.latest),
        )

    def resolve_entries(
        self,
        entries: Iterable[UsesEntry],
    ) -> tuple[list[ResolvedAction], list[ResolutionFailure]]:
        """
        Resolve every entry, collecting failures instead of stopping at them.

        A failure on one reference never prevents its siblings from
        being resolved.
        """
        t0 = time.monotonic()
        resolved = []
        failures = []
        for entry in entries:
            try:
                resolved.append(self.resolve(entry.value, entry.file_path, entry.line, entry.column))
            except ResolutionError as e:
                logger.warning(
                    "%s:%d:%d: skipping %s: %s",
                    entry.file_path, entry.line, entry.column, entry.value, e,
                )
                failures.append(ResolutionFailure(entry=entry, error=e))
        total_ms = (time.monotonic() - t0) * 1000
        logger.info(
            "Resolved %d reference(s), %d failure(s) in %.1fms",
            len(resolved), len(failures), total_ms,
        )
        return resolved, failures
