"""Shared fixtures for all tests."""

import os
import pytest

from actpin.parser import parse_workflow
from actpin.resolver import Repository, Resolver, Tag
from actpin.resolver.errors import TransportError


FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures/.github/workflows")
ACTION_FIXTURE = os.path.join(os.path.dirname(__file__), "fixtures/action/action.yml")

GITHUB_SCRIPT_SHA = "60a0d83039c74a4aee543508d2ffcb1c3799cdea"


def sha(char: str) -> str:
    """A fake 40-character commit SHA made of one repeated hex digit."""
    return char * 40


# Tags as GitHub would list them, newest first, for every action in the fixtures
FIXTURE_TAGS = {
    "actions/checkout": [
        Tag("v6.0.0-beta.1", sha("6")),
        Tag("v5.0.0", sha("5")),
        Tag("v4.2.2", sha("4")),
        Tag("v4", sha("4")),
        Tag("v4.1.0", sha("1")),
        Tag("v4.0.0", sha("0")),
    ],
    "actions/setup-node": [
        Tag("v4.0.0", sha("c")),
        Tag("v3.8.2", sha("b")),
        Tag("v3.8.1", sha("a")),
    ],
    "aws-actions/configure-aws-credentials": [
        Tag("v1.3.7", sha("f")),
        Tag("v1.2.5", sha("e")),
        Tag("v1.2.0", sha("d")),
    ],
    "actions/github-script": [
        Tag("v7.1.0", sha("8")),
        Tag("v7", GITHUB_SCRIPT_SHA),
        Tag("v7.0.1", GITHUB_SCRIPT_SHA),
    ],
    "some-org/deploy-action": [
        Tag("v1.0.0", sha("9")),
        Tag("v2.0.0", sha("2")),
    ],
    "actions/cache": [
        Tag("v3.0.0", sha("3")),
        Tag("v3", sha("3")),
    ],
}


class FakeTagSource:
    """In-memory stand-in for the GitHub API, keyed by 'owner/repo'."""

    def __init__(self, tags=None, repositories=None, error=None):
        self.tags = tags if tags is not None else {}
        self.repositories = repositories or {}
        self.error = error
        self.calls = []

    def fetch_tags(self, owner, repo):
        self.calls.append(("tags", owner, repo))
        if self.error:
            raise self.error
        return list(self.tags.get(f"{owner}/{repo}", []))

    def fetch_repository(self, owner, repo):
        self.calls.append(("repository", owner, repo))
        if self.error:
            raise self.error
        key = f"{owner}/{repo}"
        if key in self.repositories:
            return self.repositories[key]
        return Repository(name=repo, full_name=key, default_branch="main")


@pytest.fixture
def fixtures_dir():
    """Path to the fixtures workflow directory."""
    return FIXTURES_DIR


@pytest.fixture
def ci_workflow_path():
    """Path to the CI workflow fixture."""
    return os.path.join(FIXTURES_DIR, "ci.yml")


@pytest.fixture
def ci_workflow(ci_workflow_path):
    """Parsed CI workflow fixture."""
    return parse_workflow(ci_workflow_path)


@pytest.fixture
def fake_source():
    """A tag source that knows every action used by the fixtures."""
    return FakeTagSource(tags=FIXTURE_TAGS)


@pytest.fixture
def resolver(fake_source):
    return Resolver(fake_source)


@pytest.fixture
def failing_source():
    """A tag source whose every call fails."""
    return FakeTagSource(error=TransportError("connection refused"))
