"""
Extractor for action references in GitHub Actions YAML files.

Reads workflow files (jobs.<id>.steps) and composite action definitions
(runs.steps) and yields every remote `uses:` value together with its
position in the file, so a later pass can rewrite exactly that line.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import yaml

from actpin.resolver.models import UsesEntry

logger = logging.getLogger(__name__)

DEFAULT_WORKFLOW_DIR = ".github"
YAML_SUFFIXES = (".yml", ".yaml")


class WorkflowParseError(ValueError):
    """A workflow file could not be parsed."""

    def __init__(self, file_path: str, message: str):
        super().__init__(f"{file_path}: {message}")
        self.file_path = file_path


class _LineLoader(yaml.SafeLoader):
    """PyYAML loader that stores the line and column of every mapping value."""


def _construct_mapping(loader: _LineLoader, node: yaml.MappingNode) -> dict[Any, Any]:
    mapping: dict[Any, Any] = loader.construct_mapping(node, deep=True)
    mapping["__line__"] = node.start_mark.line + 1  # YAML lines are 0-indexed
    mapping["__marks__"] = {
        key_node.value: (value_node.start_mark.line + 1, value_node.start_mark.column + 1)
        for key_node, value_node in node.value
        if isinstance(key_node, yaml.ScalarNode)
    }
    return mapping


_LineLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass
class Workflow:
    """The action references found in one workflow or action file."""
    file_path: str
    name: Optional[str]
    entries: list[UsesEntry] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict)


def _is_remote_action(value: str) -> bool:
    """Whether a `uses:` value names a versioned action in another repository."""
    if value.startswith("."):
        logger.debug("Ignoring local action: %s", value)
        return False
    if value.startswith("docker://"):
        logger.debug("Ignoring docker action: %s", value)
        return False
    if "@" not in value:
        logger.debug("Ignoring action without version ref: %s", value)
        return False

    path = value.split("@", 1)[0]
    segments = path.split("/")
    if len(segments) < 2 or any(not s for s in segments):
        logger.debug("Ignoring action that is not owner/repo[/subpath]: %s", value)
        return False
    return True


def _trailing_comment(line_text: str, value: str) -> str:
    """Return the '# ...' comment following `value` on its line, if any."""
    idx = line_text.find(value)
    if idx < 0:
        return ""
    rest = line_text[idx + len(value):]
    hash_idx = rest.find("#")
    return rest[hash_idx:].strip() if hash_idx >= 0 else ""


def _extract_steps(file_path: str, steps: Any, lines: list[str]) -> list[UsesEntry]:
    """Collect remote `uses:` values from a steps sequence, in order."""
    if not isinstance(steps, list):
        return []

    entries = []
    for step in steps:
        if not isinstance(step, dict) or "uses" not in step:
            continue
        value = step["uses"]
        if not isinstance(value, str) or not _is_remote_action(value):
            continue
        line, column = step["__marks__"].get("uses", (step["__line__"], 1))
        entries.append(UsesEntry(
            value=value,
            file_path=file_path,
            line=line,
            column=column,
            comment=_trailing_comment(lines[line - 1], value) if line <= len(lines) else "",
        ))
    return entries


def parse_workflow(file_path: Union[str, Path]) -> Workflow:
    """
    Parse a single workflow or action YAML file.

    Args:
        file_path: Path to the .yml/.yaml file.

    Returns:
        A Workflow holding every remote action reference, in document order.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        WorkflowParseError: If the file isn't valid YAML or isn't a mapping.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Workflow file not found: {file_path}")

    logger.info("Parsing workflow: %s", path)

    try:
        text = path.read_text(encoding="utf-8")
        raw = yaml.load(text, Loader=_LineLoader)  # noqa: S506  # _LineLoader is safe
    except UnicodeDecodeError as e:
        raise WorkflowParseError(str(path), f"not valid UTF-8: {e}") from e
    except yaml.YAMLError as e:
        raise WorkflowParseError(str(path), f"invalid YAML: {e}") from e

    if not isinstance(raw, dict):
        logger.error("File is not a valid YAML mapping: %s", path)
        raise WorkflowParseError(str(path), "not a valid YAML mapping")

    lines = text.splitlines()
    entries = []

    jobs = raw.get("jobs", {})
    if isinstance(jobs, dict):
        for job_id, job in jobs.items():
            if str(job_id).startswith("__") or not isinstance(job, dict):
                continue
            entries.extend(_extract_steps(str(path), job.get("steps"), lines))

    runs = raw.get("runs")
    if isinstance(runs, dict):
        entries.extend(_extract_steps(str(path), runs.get("steps"), lines))

    logger.debug("Found %d action reference(s) in %s", len(entries), path)
    return Workflow(file_path=str(path), name=raw.get("name"), entries=entries, raw=raw)


def find_workflow_files(root: Union[str, Path] = DEFAULT_WORKFLOW_DIR) -> list[str]:
    """
    List the YAML files under `root`, recursively and sorted.

    A path to a single file is returned as-is.
    """
    path = Path(root)
    if path.is_file():
        return [str(path)]
    if not path.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    files = sorted(str(f) for f in path.rglob("*") if f.is_file() and f.suffix in YAML_SUFFIXES)
    logger.debug("Found %d YAML file(s) in %s", len(files), root)
    return files


def parse_workflows(file_paths: Iterable[str]) -> list[Workflow]:
    """Parse several files, skipping (and logging) the ones that fail to parse."""
    workflows = []
    for file_path in file_paths:
        try:
            workflows.append(parse_workflow(file_path))
        except WorkflowParseError as e:
            logger.warning("Skipping invalid workflow %s", e)
    logger.info("Parsed %d workflow(s)", len(workflows))
    return workflows
