"""
Handles the 'probe' command: capability checks of the library checkout.
"""

import sys

import click

from ..cli_utils import standard_command, add_common_options
from ..config import load_runtime_config, resolve_workspace_path
from ..domain import BUILTIN_SURFACES
from ..exit_codes import ValidationFailedError
from ..render import render_probe_table
from ..services import CapabilityProbe


@click.command("probe")
@click.argument("library_path", required=False, type=click.Path())
@click.option("-s", "--surface", "surfaces", multiple=True,
              type=click.Choice(sorted(BUILTIN_SURFACES) + ["all"]),
              help="Surface to probe (repeatable, default: all)")
@click.option("--table/--no-table", default=None, help="Display as formatted table (auto-detected by default)")
@add_common_options('config', 'workspace', 'format', 'verbose', 'quiet')
@standard_command
def probe_handler(library_path, surfaces, table, config_path, workspace, progress, quiet, **kwargs):
    """
    Probe the public surface of the library checkout.

    LIBRARY_PATH defaults to the configured library path. A library that
    is absent, or missing its own dependencies, is reported as skipped.

    Examples:

    \b
        repoprov probe                       # Probe ./fabric
        repoprov probe vendor/fabric -s actor
    """
    if table is None:
        table = sys.stdout.isatty()

    config = load_runtime_config(config_path, workspace)
    if library_path is None:
        library_path = resolve_workspace_path(config, config["library"]["path"])

    if not surfaces or "all" in surfaces:
        selected = list(BUILTIN_SURFACES.values())
    else:
        selected = [BUILTIN_SURFACES[name] for name in surfaces]
    results = CapabilityProbe().probe_library(library_path, selected)

    for result in results:
        if result.skipped:
            progress.warning(f"{result.surface}: skipped ({result.reason})")

    records = [result.to_dict() for result in results]
    if table:
        render_probe_table(records)
    elif not quiet:
        yield from records

    failing = [f"{r.surface}: {check}" for r in results if r.failed for check in r.failing_checks]
    if failing:
        raise ValidationFailedError(f"capability probe failed for {library_path}", failing=failing)
