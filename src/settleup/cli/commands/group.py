"""Group management commands."""

import click
from settleup.domain.errors import DomainError
from settleup.domain.group import DEFAULT_CURRENCY, GroupService
from settleup.cli.error_handling import handle_domain_error


@click.group("group")
def group_group():
    """Manage groups."""
    pass


@group_group.command("create")
@click.argument("name", metavar="GROUP_NAME")
@click.option(
    "--currency",
    default=DEFAULT_CURRENCY,
    show_default=True,
    envvar="SETTLEUP_DEFAULT_CURRENCY",
    help="Default currency for the group's expenses",
)
@click.option("--description", help="Group description")
@click.pass_context
def create_group(ctx, name: str, currency: str, description: str | None):
    """Create a new group.

    Examples:
        settleup group create "Lisbon Trip" --currency EUR
        settleup group create "Flat 4B" --description "Rent and bills"
    """
    db = ctx.obj["db"]
    service = GroupService(db)

    try:
        group_id = service.create_group(name=name, currency=currency, description=description)
    except DomainError as e:
        handle_domain_error(ctx, e)
    group = service.get_group(group_id)
    click.echo(f"Created group '{group.name}' (ID: {group_id}, currency: {group.currency})")


@group_group.command("list")
@click.pass_context
def list_groups(ctx):
    """List all groups."""
    db = ctx.obj["db"]
    service = GroupService(db)

    groups = service.list_groups()
    if not groups:
        click.echo("No groups found.")
        return

    click.echo("\nGroups:")
    click.echo("-" * 60)
    for grp in groups:
        members = service.list_members(grp.id)
        click.echo(
            f"ID: {grp.id:3d} | {grp.name:20s} | {grp.currency:4s} | "
            f"{len(members)} member{'s' if len(members) != 1 else ''}"
        )


def register_commands(cli):
    """Register group commands with main CLI."""
    cli.add_command(group_group)
