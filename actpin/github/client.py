"""
GitHub REST client for tags and repository metadata.

Supports optional authentication via the GITHUB_TOKEN environment
variable. Failures are raised as TransportError and never retried;
CachedTagSource keeps one run from asking GitHub the same question twice.
"""

import logging
import os
from typing import Any, Optional

import requests

from actpin.resolver.errors import TransportError
from actpin.resolver.models import Repository, Tag
from actpin.resolver.source import TagSource

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 10.0
TOKEN_ENV_VAR = "GITHUB_TOKEN"
PER_PAGE = 100


class GitHubClient:
    """Lightweight REST client for the GitHub endpoints the resolver needs."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.token = token if token is not None else os.environ.get(TOKEN_ENV_VAR)
        self.timeout = timeout
        self.session = session or requests.Session()
        if not self.token:
            logger.debug("%s is not set, using unauthenticated requests", TOKEN_ENV_VAR)

    def _get_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "actpin",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _get(self, url: str, context: str, params: Optional[dict[str, Any]] = None) -> requests.Response:
        logger.debug("GET %s", url)
        try:
            response = self.session.get(
                url,
                headers=self._get_headers(),
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{context}: {e}") from e
        if response.status_code // 100 != 2:
            raise TransportError(f"{context}: HTTP {response.status_code}")
        return response

    def fetch_tags(self, owner: str, repo: str) -> list[Tag]:
        """
        Fetch every tag of a repository, following pagination.

        Returns an empty list for a repository with no tags.
        """
        context = f"list tags for {owner}/{repo}"
        url: Optional[str] = f"{self.api_url}/repos/{owner}/{repo}/tags"
        params: Optional[dict[str, Any]] = {"per_page": PER_PAGE}
        tags = []
        while url:
            response = self._get(url, context, params)
            try:
                page = response.json()
                tags.extend(
                    Tag(name=item["name"], commit_sha=item["commit"]["sha"])
                    for item in page
                )
            except (ValueError, KeyError, TypeError) as e:
                raise TransportError(f"{context}: unexpected response: {e}") from e
            # The next link already carries the query string
            url = response.links.get("next", {}).get("url")
            params = None
        logger.debug("Fetched %d tag(s) for %s/%s", len(tags), owner, repo)
        return tags

    def fetch_repository(self, owner: str, repo: str) -> Repository:
        """Fetch repository metadata (name, default branch, visibility)."""
        context = f"fetch repository {owner}/{repo}"
        response = self._get(f"{self.api_url}/repos/{owner}/{repo}", context)
        try:
            data = response.json()
            return Repository(
                name=data["name"],
                full_name=data["full_name"],
                default_branch=data["default_branch"],
                private=bool(data.get("private", False)),
            )
        except (ValueError, KeyError, TypeError) as e:
            raise TransportError(f"{context}: unexpected response: {e}") from e


class CachedTagSource:
    """
    Memoizes a TagSource per (owner, repo) for the lifetime of one run.

    Create one per run and pass it to the Resolver; nothing is shared
    between instances. Failures are not cached.
    """

    def __init__(self, source: TagSource):
        self.source = source
        self._tags: dict[tuple[str, str], list[Tag]] = {}
        self._repositories: dict[tuple[str, str], Repository] = {}

    def fetch_tags(self, owner: str, repo: str) -> list[Tag]:
        key = (owner, repo)
        if key in self._tags:
            logger.debug("Using cached tags for %s/%s", owner, repo)
        else:
            self._tags[key] = self.source.fetch_tags(owner, repo)
        return self._tags[key]

    def fetch_repository(self, owner: str, repo: str) -> Repository:
        key = (owner, repo)
        if key in self._repositories:
            logger.debug("Using cached repository for %s/%s", owner, repo)
        else:
            self._repositories[key] = self.source.fetch_repository(owner, repo)
        return self._repositories[key]
