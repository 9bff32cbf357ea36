"""
Handles the 'validate' command: structural checks of one checkout.
"""

import sys

import click

from ..cli_utils import standard_command, add_common_options
from ..config import load_runtime_config
from ..exit_codes import ValidationFailedError
from ..render import render_validation_table
from ..services import StructuralValidator


@click.command("validate")
@click.argument("path", type=click.Path(file_okay=False))
@click.option("--name", "expected_name", help="Required value of the descriptor's name field")
@click.option("-r", "--require-dir", "required", multiple=True, help="Directory that must exist (repeatable)")
@click.option("--descriptor", help="Descriptor filename (default: from config)")
@click.option("--table/--no-table", default=None, help="Display as formatted table (auto-detected by default)")
@add_common_options('config', 'format', 'verbose', 'quiet')
@standard_command
def validate_handler(path, expected_name, required, descriptor, table, config_path, progress, quiet, **kwargs):
    """
    Check that PATH looks like a well-formed package.

    Every check runs; the output names each failing artifact.

    Examples:

    \b
        repoprov validate stores/repositories/demo-repository
        repoprov validate fabric --name @fabric/core -r types -r services -r tests
    """
    if table is None:
        table = sys.stdout.isatty()

    config = load_runtime_config(config_path)
    validation = config["validation"]

    validator = StructuralValidator(validation.get("default_entry_point", "index.js"))
    result = validator.validate(
        path,
        required or validation.get("required_directories", []),
        expected_name=expected_name,
        descriptor_name=descriptor or validation.get("descriptor", "package.json"),
    )

    if table:
        render_validation_table(result.to_dict())
    elif not quiet:
        yield result.to_dict()

    if not result.passed:
        failing = result.failing_artifacts
        progress.error(f"{path}: {', '.join(failing)}")
        raise ValidationFailedError(f"validation failed for {path}", failing=failing)
    progress.success(f"{path} passed all checks")
