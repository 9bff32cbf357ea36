#!/usr/bin/env python3

import click

from repoprov.commands.provision import provision_handler
from repoprov.commands.validate import validate_handler
from repoprov.commands.probe import probe_handler
from repoprov.commands.manifest import manifest_handler
from repoprov.commands.store import store_cmd
from repoprov.commands.config import config_cmd


@click.group()
@click.version_option(package_name="repoprov")
def cli():
    """repoprov - Provision and validate declared repositories in a workspace.

    Clones each repository named in the workspace manifest, checks its
    package structure, records provenance, and probes the external
    library checkout.
    """
    pass


# Core commands
cli.add_command(provision_handler, name='provision')
cli.add_command(validate_handler, name='validate')
cli.add_command(probe_handler, name='probe')
cli.add_command(manifest_handler, name='manifest')

# Command groups
cli.add_command(store_cmd)
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
