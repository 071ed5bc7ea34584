from actpin.resolver.source import TagSource

from .client import CachedTagSource, GitHubClient

__all__ = ["CachedTagSource", "GitHubClient", "TagSource"]
