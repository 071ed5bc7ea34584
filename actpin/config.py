"""
Configuration file support for actpin.

Looks for a .actpin.yml file in the project and loads settings that
control where workflows live, which files and actions to leave alone,
and how to talk to the GitHub API.

Example .actpin.yml:

    # Directory scanned when no path is given
    workflow_dir: .github

    # Files to exclude (glob patterns matched against the file path)
    exclude:
      - "**/legacy-*.yml"

    # Actions that are never resolved or rewritten
    ignore_actions:
      - my-org/internal-action

    # GitHub API endpoint (GitHub Enterprise Server uses https://HOST/api/v3)
    api_url: https://api.github.com

    # HTTP timeout in seconds
    timeout: 10

The API token is never read from this file; set GITHUB_TOKEN instead.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from actpin.github.client import DEFAULT_API_URL, DEFAULT_TIMEOUT
from actpin.parser.workflow_parser import DEFAULT_WORKFLOW_DIR

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = ".actpin.yml"


class ConfigError(ValueError):
    """The config file has a value of the wrong type."""


@dataclass
class Config:
    """Parsed actpin configuration."""
    workflow_dir: str = DEFAULT_WORKFLOW_DIR
    exclude: list[str] = field(default_factory=list)
    ignore_actions: list[str] = field(default_factory=list)
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT


def load_config(config_path: Optional[str] = None, scan_path: Optional[str] = None) -> Config:
    """
    Load configuration from a .actpin.yml file.

    Search order:
      1. Explicit config_path if provided
      2. .actpin.yml in the scan_path directory (or its parent if scan_path is a file),
         then in each parent directory
      3. .actpin.yml in the current working directory

    Returns a Config with defaults if no config file is found.

    Raises:
        ConfigError: If a key holds a value of the wrong type.
    """
    path = _find_config_file(config_path, scan_path)

    if path is None:
        logger.debug("No config file found, using defaults")
        return Config()

    logger.info("Loading config from %s", path)

    with open(path, "r") as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        logger.warning("Config file is not a YAML mapping, using defaults")
        return Config()

    config = Config(
        workflow_dir=raw.get("workflow_dir", DEFAULT_WORKFLOW_DIR),
        exclude=raw.get("exclude") or [],
        ignore_actions=raw.get("ignore_actions") or [],
        api_url=raw.get("api_url", DEFAULT_API_URL),
        timeout=raw.get("timeout", DEFAULT_TIMEOUT),
    )
    _validate(config, path)
    return config


def _validate(config: Config, path: str) -> None:
    for key in ("exclude", "ignore_actions"):
        value = getattr(config, key)
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"{path}: '{key}' must be a list of strings")
    for key in ("workflow_dir", "api_url"):
        if not isinstance(getattr(config, key), str):
            raise ConfigError(f"{path}: '{key}' must be a string")
    if isinstance(config.timeout, bool) or not isinstance(config.timeout, (int, float)) or config.timeout <= 0:
        raise ConfigError(f"{path}: 'timeout' must be a positive number")


def _find_config_file(
    config_path: Optional[str] = None,
    scan_path: Optional[str] = None,
) -> Optional[str]:
    """Find the config file, returning its path or None."""
    # 1. Explicit path
    if config_path:
        p = Path(config_path)
        if p.is_file():
            return str(p)
        logger.warning("Config file not found: %s", config_path)
        return None

    # 2. Relative to scan path
    if scan_path:
        scan_p = Path(scan_path).resolve()
        if scan_p.is_file():
            scan_p = scan_p.parent
        for directory in (scan_p, *scan_p.parents):
            candidate = directory / DEFAULT_CONFIG_FILENAME
            if candidate.is_file():
                return str(candidate)

    # 3. Current working directory
    cwd_candidate = Path.cwd() / DEFAULT_CONFIG_FILENAME
    if cwd_candidate.is_file():
        return str(cwd_candidate)

    return None
