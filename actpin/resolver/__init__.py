from .engine import Resolver
from .models import (
    ActionReference,
    Repository,
    ResolutionFailure,
    ResolvedAction,
    RewriteMode,
    RewritePlan,
    Tag,
    UsesEntry,
    VersionStyle,
)
from .planner import plan_rewrite

__all__ = [
    "Resolver",
    "ActionReference",
    "Repository",
    "ResolutionFailure",
    "ResolvedAction",
    "RewriteMode",
    "RewritePlan",
    "Tag",
    "UsesEntry",
    "VersionStyle",
    "plan_rewrite",
]
