"""
Console reporter: one line per reference, in file:line:col order.

Lines start with the reference's location so editors and terminals can
jump straight to it.
"""

from actpin.resolver.models import (
    ResolutionFailure,
    RewritePlan,
    UsesEntry,
    VersionStyle,
)

# ANSI color codes for terminal output
YELLOW = "\033[33m"
BOLD = "\033[1m"
RESET = "\033[0m"
ARROW = "→"


def report_entries(entries: list[UsesEntry]) -> str:
    """Format extracted references as 'file:line:col: value[ # comment]' lines."""
    lines = []
    for entry in entries:
        comment = f" {entry.comment}" if entry.comment else ""
        lines.append(f"{entry.file_path}:{entry.line}:{entry.column}: {entry.value}{comment}")
    return "\n".join(lines)


def _outdated_line(plan: RewritePlan) -> str:
    resolved = plan.resolved
    current = str(resolved.reference)
    if resolved.style is VersionStyle.PINNED:
        return (
            f"{resolved.location}: {current} ({resolved.current_tag.name}) "
            f"{ARROW} {plan.reference_text} ({plan.annotation})"
        )
    return f"{resolved.location}: {current} {ARROW} {plan.reference_text}"


def report_outdated(plans: list[RewritePlan]) -> str:
    """
    Format outdated references.

    Pinned references show the tag names on both sides, since a bare
    commit SHA says nothing about the version it is.
    """
    return "\n".join(_outdated_line(plan) for plan in plans)


def report_plans(plans: list[RewritePlan]) -> str:
    """Format planned rewrites, e.g. for a dry run."""
    return "\n".join(
        f"{plan.resolved.location}: {plan.resolved.reference} {ARROW} {plan.replacement}"
        for plan in plans
    )


def report_failures(failures: list[ResolutionFailure]) -> str:
    """Format references that could not be resolved."""
    if not failures:
        return ""
    lines = [f"{YELLOW}{BOLD}Skipped {len(failures)} reference(s):{RESET}"]
    for failure in failures:
        lines.append(
            f"  {failure.location}: {failure.entry.value}: "
            f"{type(failure.error).__name__}: {failure.error}"
        )
    return "\n".join(lines)
