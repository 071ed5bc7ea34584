"""
The interface the resolver uses to look up tags and repository metadata.

Implementations must return an empty list (not raise) for a repository
with no tags, raise TransportError on any I/O failure, and return the
same data for repeated calls with the same key within one run.
"""

from typing import Protocol

from actpin.resolver.models import Repository, Tag


class TagSource(Protocol):
    def fetch_tags(self, owner: str, repo: str) -> list[Tag]:
        ...

    def fetch_repository(self, owner: str, repo: str) -> Repository:
        ...
