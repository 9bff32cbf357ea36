"""
Handles the 'manifest' command: show what the manifest declares.
"""

import click

from ..cli_utils import standard_command, add_common_options
from ..config import load_runtime_config, resolve_workspace_path
from ..exit_codes import ConfigError
from ..manifest import load_manifest
from .provision import report_manifest_problems


@click.command("manifest")
@click.option("--strict", is_flag=True, help="Fail if the manifest is unreadable or has malformed entries")
@add_common_options('config', 'workspace', 'manifest', 'format', 'verbose', 'quiet')
@standard_command
def manifest_handler(strict, config_path, workspace, manifest, progress, **kwargs):
    """
    List the repositories declared in the manifest.

    Outputs one record per declaration followed by a manifest record with
    the count and any malformed identities.
    """
    config = load_runtime_config(config_path, workspace)
    path = manifest or resolve_workspace_path(config, config["workspace"]["manifest"])

    result = load_manifest(path)
    report_manifest_problems(result)

    for declaration in result:
        yield declaration.to_dict()
    yield result.to_dict()

    if strict and (result.diagnostic or result.malformed):
        raise ConfigError(result.diagnostic or f"malformed entries: {', '.join(result.malformed)}")
