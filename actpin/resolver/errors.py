"""
Errors raised while resolving an action reference.

Every condition that makes a single reference unresolvable derives from
ResolutionError, so callers can skip that reference and keep going with
its siblings.
"""


class ResolutionError(Exception):
    """Base class for per-reference resolution failures."""


class MalformedReference(ResolutionError):
    """Reference text does not split into owner/repo[/subpath]@version."""


class UnclassifiableVersion(ResolutionError):
    """Version text is empty or contains whitespace."""


class NoTagsAvailable(ResolutionError):
    """The action's repository has no tags at all."""


class NoMatchingTag(ResolutionError):
    """The requested version does not correspond to any published tag."""


class NonDefaultBranch(ResolutionError):
    """A branch reference targets a branch other than the default branch."""


class NoResolvableVersion(ResolutionError):
    """A branch reference cannot be resolved to a stable tagged version."""


class TransportError(ResolutionError):
    """The tag source failed to answer (network, HTTP status, bad payload)."""


class RepositoryUnavailable(TransportError):
    """Repository metadata could not be fetched."""


class PlanningError(RuntimeError):
    """A resolved action is missing a tag the rewrite planner needs."""
