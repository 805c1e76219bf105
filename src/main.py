"""
Command line entry point for the GitHub Team Membership provider.

Invokes a resource handler locally from a request file, the way the host
would, and prints the resulting ProgressEvent.
"""

import asyncio
import json
import logging
import sys

import click
import yaml
from tabulate import tabulate

from config import get_config
from plugins.base import Action, ResourceHandlerRequest
from plugins.registry import get_registry, register_builtin_resources
from plugins.resources.team_membership.models import TYPE_NAME


def _load_file(filename):
    with open(filename, "r") as f:
        if filename.endswith(".yaml") or filename.endswith(".yml"):
            return yaml.safe_load(f) or {}
        return json.load(f)


def _echo_data(data, output):
    if output == "yaml":
        click.echo(yaml.dump(data, default_flow_style=False, sort_keys=False))
    else:
        click.echo(json.dumps(data, indent=2))


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
def cli(log_level):
    """GitHub Team Membership provider - run resource handlers locally"""
    logging.basicConfig(
        level=(log_level or get_config().provider.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    register_builtin_resources()


@cli.command()
@click.argument(
    "action", type=click.Choice([a.value for a in Action], case_sensitive=False)
)
@click.argument("filename", type=click.Path(exists=True))
@click.option("--type-name", "-t", default=TYPE_NAME, help="Resource type name")
@click.option(
    "--output", "-o", type=click.Choice(["json", "yaml", "table"]), default="json"
)
def invoke(action, filename, type_name, output):
    """Invoke a handler with a request from a YAML/JSON file"""
    try:
        resource = get_registry().get_resource(type_name)
    except ValueError as e:
        raise click.ClickException(str(e))

    data = _load_file(filename)
    request = ResourceHandlerRequest.from_dict(data)
    event = asyncio.run(
        resource.entrypoint(action, request, data.get("callbackContext"))
    )

    if output == "table" and event.succeeded and event.resource_models is not None:
        rows = [
            [m.org, m.team_slug, m.username, m.role or "", m.state]
            for m in event.resource_models
        ]
        click.echo(
            tabulate(
                rows,
                headers=["Org", "Team", "Username", "Role", "State"],
                tablefmt="grid",
            )
        )
    else:
        _echo_data(event.to_dict(), "yaml" if output == "yaml" else "json")

    if not event.succeeded:
        sys.exit(1)


@cli.command()
@click.option("--type-name", "-t", default=TYPE_NAME, help="Resource type name")
@click.option("--output", "-o", type=click.Choice(["json", "yaml"]), default="json")
def schema(type_name, output):
    """Print the resource schema"""
    try:
        resource = get_registry().get_resource(type_name)
    except ValueError as e:
        raise click.ClickException(str(e))
    _echo_data(resource.schema, output)


@cli.command()
def types():
    """List registered resource types"""
    registry = get_registry()
    rows = []
    for type_name in registry.list_resources():
        info = registry.get_resource_info(type_name)
        rows.append([type_name, info["version"] if info else ""])
    click.echo(tabulate(rows, headers=["Type", "Version"], tablefmt="grid"))


if __name__ == "__main__":
    cli()
