"""
CLI entry point: ties together parser → resolver → planner → writer/reporter.

Usage:
  # List every action reference (no network access):
  python3 -m actpin ls

  # Show references that have a newer release:
  python3 -m actpin outdated .github/workflows/

  # Update references to their newest release, keeping their granularity:
  python3 -m actpin update

  # Update and pin to commit SHAs (required for branch references like @main):
  python3 -m actpin update --pin

  # Pin to the newest commit inside each reference's compatibility band:
  python3 -m actpin pin

Exit codes:
  0 — success (for `outdated`: nothing is outdated)
  1 — `outdated` found outdated references
  2 — error (bad path, invalid workflow, bad config)
"""

import fnmatch
import logging
import os
import sys
from typing import Optional

import click
import yaml

from actpin.config import Config, ConfigError, load_config
from actpin.github import CachedTagSource, GitHubClient
from actpin.parser import Workflow, WorkflowParseError, find_workflow_files, parse_workflow, parse_workflows
from actpin.reporter import report_entries, report_failures, report_json, report_outdated, report_plans
from actpin.resolver import Resolver, RewriteMode, plan_rewrite
from actpin.writer import apply_plans

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_OUTDATED = 1
EXIT_ERROR = 2


def _setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(EXIT_ERROR)


def _load(path: Optional[str], config_path: Optional[str]) -> tuple[Config, list[Workflow]]:
    """Load config and parse the workflows to operate on, exiting on errors."""
    try:
        config = load_config(config_path=config_path, scan_path=path)
    except (ConfigError, OSError, yaml.YAMLError) as e:
        _fail(f"invalid config: {e}")

    root = os.path.abspath(path or config.workflow_dir)

    try:
        if os.path.isfile(root):
            workflows = [parse_workflow(root)]
        elif os.path.isdir(root):
            files = find_workflow_files(root)
            if config.exclude:
                before = len(files)
                files = [
                    f for f in files
                    if not any(fnmatch.fnmatch(f, pat) for pat in config.exclude)
                ]
                if before - len(files):
                    logger.info("Excluded %d file(s) via config", before - len(files))
            workflows = parse_workflows(files)
        else:
            _fail(f"'{root}' is not a file or directory.")
    except WorkflowParseError as e:
        _fail(f"could not parse workflow: {e}")

    if not workflows:
        click.echo("No workflow files found.")
        sys.exit(EXIT_OK)

    if config.ignore_actions:
        for wf in workflows:
            wf.entries = [
                e for e in wf.entries
                if e.value.split("@", 1)[0] not in config.ignore_actions
            ]

    return config, workflows


def _build_resolver(config: Config) -> Resolver:
    client = GitHubClient(api_url=config.api_url, timeout=config.timeout)
    return Resolver(CachedTagSource(client))


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")
def cli(verbose: bool):
    """Update, manage and pin the GitHub Actions your workflows use."""
    _setup_logging(verbose)


@cli.command("ls")
@click.argument("path", required=False)
@click.option("--config", "config_path", default=None, help="Path to .actpin.yml config file.")
def list_actions(path: Optional[str], config_path: Optional[str]):
    """List the actions used by workflow files."""
    _, workflows = _load(path, config_path)
    entries = [e for wf in workflows for e in wf.entries]
    if entries:
        click.echo(report_entries(entries))
    sys.exit(EXIT_OK)


@cli.command()
@click.argument("path", required=False)
@click.option("--format", "output_format", type=click.Choice(["console", "json"]), default="console", help="Output format.")
@click.option("--config", "config_path", default=None, help="Path to .actpin.yml config file.")
def outdated(path: Optional[str], output_format: str, config_path: Optional[str]):
    """Check for outdated actions.

    Exits with code 0 if everything is current, 1 if anything is outdated, 2 on error.
    """
    config, workflows = _load(path, config_path)
    resolver = _build_resolver(config)

    plans = []
    failures = []
    for wf in workflows:
        resolved, wf_failures = resolver.resolve_entries(wf.entries)
        failures.extend(wf_failures)
        plans.extend(plan_rewrite(r, RewriteMode.UPDATE) for r in resolved if r.outdated)

    if output_format == "json":
        click.echo(report_json(plans, failures))
    else:
        if plans:
            click.echo(report_outdated(plans))
        else:
            click.echo("All actions are up to date.")
        if failures:
            click.echo(report_failures(failures), err=True)

    sys.exit(EXIT_OUTDATED if plans else EXIT_OK)


def _rewrite(path: Optional[str], config_path: Optional[str], mode: RewriteMode, dry_run: bool) -> None:
    config, workflows = _load(path, config_path)
    resolver = _build_resolver(config)

    failures = []
    total = 0
    for wf in workflows:
        resolved, wf_failures = resolver.resolve_entries(wf.entries)
        failures.extend(wf_failures)
        plans = [plan_rewrite(r, mode) for r in resolved]
        if not plans:
            continue
        if dry_run:
            click.echo(report_plans(plans))
            continue
        changed = apply_plans(wf.file_path, plans)
        if changed:
            click.echo(f"Updated {changed} reference(s) in {wf.file_path}")
        total += changed

    if not dry_run and not total:
        click.echo("Nothing to update.")
    if failures:
        click.echo(report_failures(failures), err=True)
    sys.exit(EXIT_OK)


@cli.command()
@click.argument("path", required=False)
@click.option("--pin", is_flag=True, help="Pin actions to commit SHAs after updating them (required for branch references like @main).")
@click.option("--dry-run", is_flag=True, help="Print the planned changes without writing files.")
@click.option("--config", "config_path", default=None, help="Path to .actpin.yml config file.")
def update(path: Optional[str], pin: bool, dry_run: bool, config_path: Optional[str]):
    """Update actions to their newest release."""
    _rewrite(path, config_path, RewriteMode.PIN if pin else RewriteMode.UPDATE, dry_run)


@cli.command()
@click.argument("path", required=False)
@click.option("--dry-run", is_flag=True, help="Print the planned changes without writing files.")
@click.option("--config", "config_path", default=None, help="Path to .actpin.yml config file.")
def pin(path: Optional[str], dry_run: bool, config_path: Optional[str]):
    """Pin actions to commit SHAs without leaving their compatibility band."""
    _rewrite(path, config_path, RewriteMode.FREEZE, dry_run)


if __name__ == "__main__":
    cli()
