from .workflow_parser import (
    Workflow,
    WorkflowParseError,
    find_workflow_files,
    parse_workflow,
    parse_workflows,
)

__all__ = [
    "Workflow",
    "WorkflowParseError",
    "find_workflow_files",
    "parse_workflow",
    "parse_workflows",
]
