"""
Handles the 'store' command group: read provenance records.
"""

import click

from ..cli_utils import standard_command, add_common_options
from ..config import CLONE_SUFFIX, load_runtime_config, resolve_workspace_path
from ..domain import clone_key
from ..exit_codes import CommandError, StoreUnavailableError, DATA_ERROR
from ..services import open_provenance_store


def _open(config):
    store_config = config["store"]
    store = open_provenance_store(
        resolve_workspace_path(config, store_config["path"]),
        enabled=bool(store_config.get("enabled", True)),
    )
    if not store.available:
        raise StoreUnavailableError(f"provenance store unavailable: {store.reason}")
    return store


@click.group("store")
def store_cmd():
    """Inspect recorded provenance."""
    pass


@store_cmd.command("get")
@click.argument("identity")
@add_common_options('config', 'workspace', 'format', 'verbose', 'quiet')
@standard_command
def store_get(identity, config_path, workspace, progress, **kwargs):
    """
    Show the provenance record for IDENTITY.

    IDENTITY may be the manifest key ("demo") or the store key
    ("demo-repository").
    """
    store = _open(load_runtime_config(config_path, workspace))
    key = identity if identity.endswith(CLONE_SUFFIX) else clone_key(identity)

    record = store.get(key)
    if record is None:
        raise CommandError(f"no provenance recorded for {key}", DATA_ERROR)
    return {'key': key, **record.to_dict()}


@store_cmd.command("list")
@add_common_options('config', 'workspace', 'format', 'verbose', 'quiet')
@standard_command
def store_list(config_path, workspace, progress, **kwargs):
    """List every provenance record."""
    store = _open(load_runtime_config(config_path, workspace))
    for key in sorted(store.keys()):
        record = store.get(key)
        if record is not None:
            yield {'key': key, **record.to_dict()}
