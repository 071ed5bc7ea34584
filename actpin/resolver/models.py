"""
Value objects shared by the resolution engine.

Everything here is frozen: a reference is extracted once, resolved once
and consumed by the rewrite planner without being mutated in between.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class VersionStyle(Enum):
    PINNED = "pinned"
    SEMVER_FULL = "semver"
    SEMVER_MINOR = "semver-minor"
    SEMVER_MAJOR = "semver-major"
    BRANCH = "branch"


class RewriteMode(Enum):
    UPDATE = "update"   # newest version, same granularity as written
    PIN = "pin"         # newest version, as a commit SHA
    FREEZE = "freeze"   # stay inside the compatibility band, as a commit SHA


@dataclass(frozen=True)
class UsesEntry:
    """A raw `uses:` value found in a workflow file."""
    value: str          # e.g. "actions/checkout@v4"
    file_path: str
    line: int           # 1-based
    column: int         # 1-based
    comment: str = ""   # trailing "# ..." on the same line, if any


@dataclass(frozen=True)
class ActionReference:
    """A parsed owner/repo[/subpath]@version reference."""
    owner: str
    repo: str
    subpath: str
    raw_version: str
    file_path: str = ""
    line: int = 0
    column: int = 0

    @property
    def canonical_name(self) -> str:
        name = f"{self.owner}/{self.repo}"
        if self.subpath:
            name += f"/{self.subpath}"
        return name

    @property
    def location(self) -> str:
        return f"{self.file_path}:{self.line}:{self.column}"

    def __str__(self) -> str:
        return f"{self.canonical_name}@{self.raw_version}"


@dataclass(frozen=True)
class Tag:
    """A published tag and the commit it points at."""
    name: str
    commit_sha: str


@dataclass(frozen=True)
class Repository:
    """The repository metadata the engine cares about."""
    name: str
    full_name: str
    default_branch: str
    private: bool = False


@dataclass(frozen=True)
class ResolvedAction:
    """An action reference reconciled against its repository's tags."""
    reference: ActionReference
    style: VersionStyle
    current_tag: Optional[Tag]
    latest_tag: Optional[Tag]
    pin_target: Optional[Tag]
    outdated: bool = False

    @property
    def canonical_name(self) -> str:
        return self.reference.canonical_name

    @property
    def raw_version(self) -> str:
        return self.reference.raw_version

    @property
    def location(self) -> str:
        return self.reference.location


@dataclass(frozen=True)
class RewritePlan:
    """The text that should replace a reference's `uses:` value."""
    resolved: ResolvedAction
    mode: RewriteMode
    reference_text: str     # e.g. "actions/checkout@v4"
    annotation: str         # e.g. "v4.2.2"

    @property
    def replacement(self) -> str:
        return f"{self.reference_text} # {self.annotation}"

    @property
    def changed(self) -> bool:
        return self.reference_text != str(self.resolved.reference)


@dataclass(frozen=True)
class ResolutionFailure:
    """A reference that could not be resolved, and why."""
    entry: UsesEntry
    error: Exception

    @property
    def location(self) -> str:
        return f"{self.entry.file_path}:{self.entry.line}:{self.entry.column}"
