"""
JSON reporter: outputs outdated references as structured JSON for programmatic use.
"""

import json
import logging

from actpin.resolver.models import ResolutionFailure, RewritePlan

logger = logging.getLogger(__name__)


def report_json(plans: list[RewritePlan], failures: list[ResolutionFailure]) -> str:
    """
    Format outdated references and resolution failures as a JSON string.

    Args:
        plans: Update plans for the outdated references.
        failures: References that could not be resolved.

    Returns:
        A JSON string with both lists.
    """
    data = {
        "total": len(plans),
        "outdated": [
            {
                "file_path": p.resolved.reference.file_path,
                "line": p.resolved.reference.line,
                "column": p.resolved.reference.column,
                "action": p.resolved.canonical_name,
                "style": p.resolved.style.value,
                "current": p.resolved.raw_version,
                "current_tag": p.resolved.current_tag.name if p.resolved.current_tag else None,
                "latest_tag": p.resolved.latest_tag.name if p.resolved.latest_tag else None,
                "latest_sha": p.resolved.latest_tag.commit_sha if p.resolved.latest_tag else None,
                "replacement": p.replacement,
            }
            for p in plans
        ],
        "failures": [
            {
                "file_path": f.entry.file_path,
                "line": f.entry.line,
                "column": f.entry.column,
                "reference": f.entry.value,
                "error": type(f.error).__name__,
                "message": str(f.error),
            }
            for f in failures
        ],
    }
    output = json.dumps(data, indent=2)
    logger.info("JSON report: %d outdated, %d failure(s), %d bytes", len(plans), len(failures), len(output))
    return output
