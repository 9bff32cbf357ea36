"""
Handles the 'provision' command.

Clones, validates and records every repository declared in the manifest,
then checks the external library checkout.

This command follows the usual output conventions:
- Default output is JSONL, one record per identity, then a summary
- --table for a human-readable table
"""

import asyncio
import sys

import click

from ..cli_utils import standard_command, add_common_options
from ..config import load_runtime_config, resolve_workspace_path, logger
from ..exit_codes import PartialSuccessError
from ..manifest import load_manifest
from ..render import render_provision_table
from ..services import Orchestrator, ProvenanceService, open_provenance_store


def report_manifest_problems(manifest) -> None:
    """Log manifest diagnostics; loading itself never logs."""
    if manifest.diagnostic:
        logger.warning(f"Could not load manifest: {manifest.diagnostic}")
    for identity in manifest.malformed:
        logger.warning(f"Ignoring malformed manifest entry: {identity}")


@click.command("provision")
@add_common_options('config', 'workspace', 'manifest')
@click.option("--concurrency", type=click.IntRange(min=1), help="Repositories provisioned at once")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), help="Seconds allowed per repository")
@click.option("--no-store", is_flag=True, help="Do not record provenance")
@click.option("--no-probe", is_flag=True, help="Skip capability probes of the library checkout")
@click.option("--table/--no-table", default=None, help="Display as formatted table (auto-detected by default)")
@add_common_options('format', 'verbose', 'quiet')
@standard_command
def provision_handler(config_path, workspace, manifest, concurrency, timeout, no_store, no_probe,
                      table, progress, quiet, **kwargs):
    """
    Provision every repository declared in the manifest.

    Each repository is cloned fresh (shallow) into
    <workspace>/stores/repositories/<identity>-repository, checked for a
    package descriptor, entry point and required directories, and recorded
    in the provenance store when it is available.

    Examples:

    \b
        repoprov provision                      # Use ./stores/meta.json
        repoprov provision -w ~/fabric-hub      # Another workspace
        repoprov provision --no-store --table   # Skip provenance, show a table
    """
    if table is None:
        table = sys.stdout.isatty()

    config = load_runtime_config(config_path, workspace)

    manifest_path = manifest or resolve_workspace_path(config, config["workspace"]["manifest"])
    declarations = load_manifest(manifest_path)
    report_manifest_problems(declarations)
    progress(f"Loaded {len(declarations)} repositories from {manifest_path}")

    store_config = config["store"]
    store = open_provenance_store(
        resolve_workspace_path(config, store_config["path"]),
        enabled=bool(store_config.get("enabled", True)) and not no_store,
    )
    if not store.available:
        progress.warning("Provenance store unavailable; clones will not be recorded")

    orchestrator = Orchestrator.from_config(
        config,
        provenance=ProvenanceService(store),
        max_concurrent=concurrency,
        timeout=timeout,
    )

    with progress.status(f"Provisioning {len(declarations)} repositories..."):
        report = asyncio.run(orchestrator.run(declarations))

    library = config["library"]
    outcome = orchestrator.check_library(
        resolve_workspace_path(config, library["path"]),
        expected_name=library.get("name"),
        required_directories=library.get("required_directories", []),
        probe=bool(library.get("probe_enabled", True)) and not no_probe,
    )
    orchestrator.attach_library(report, outcome)

    records = [detail.to_dict() for detail in report.details]
    records.extend(probe.to_dict() for probe in report.probes)
    if report.library:
        records.append(report.library)
    records.append(report.to_dict())

    if report.passed:
        progress.success(f"Provisioned {report.passed} repositories")
    if report.skipped:
        progress.warning(f"Skipped {report.skipped} repositories")

    if table:
        render_provision_table(records)
    elif not quiet:
        yield from records

    if not report.success:
        if report.failed:
            message = f"{report.failed} of {report.total} repositories failed"
        else:
            message = f"library checks failed for {outcome['path']}"
        raise PartialSuccessError(
            message,
            succeeded=report.passed,
            failed=report.failed,
        )
