"""Member management commands."""

import click
from settleup.domain.errors import DomainError
from settleup.domain.group import GroupService
from settleup.cli.error_handling import handle_domain_error, resolve_group_or_exit


@click.group("member")
def member_group():
    """Manage group members."""
    pass


@member_group.command("add")
@click.argument("group", metavar="GROUP")
@click.argument("handles", metavar="HANDLE...", nargs=-1, required=True)
@click.option("--name", "display_name", help="Display name (only with a single HANDLE)")
@click.pass_context
def add_member(ctx, group: str, handles: tuple[str, ...], display_name: str | None):
    """Add one or more members to a group.

    GROUP can be a group name or ID. HANDLE is the short name used to refer
    to the member in expenses and settlements.

    Examples:
        settleup member add "Lisbon Trip" alice bob carol
        settleup member add 1 dave --name "Dave Smith"
    """
    db = ctx.obj["db"]
    service = GroupService(db)
    grp = resolve_group_or_exit(ctx, service, group)

    if display_name is not None and len(handles) > 1:
        click.echo("Error: --name can only be used when adding a single member", err=True)
        ctx.exit(1)

    for handle in handles:
        try:
            service.add_member(grp.id, handle, display_name)
        except DomainError as e:
            handle_domain_error(ctx, e)
        click.echo(f"Added '{handle}' to group '{grp.name}'")


@member_group.command("list")
@click.argument("group", metavar="GROUP")
@click.pass_context
def list_members(ctx, group: str):
    """List members of a group."""
    db = ctx.obj["db"]
    service = GroupService(db)
    grp = resolve_group_or_exit(ctx, service, group)

    members = service.list_members(grp.id)
    if not members:
        click.echo(f"Group '{grp.name}' has no members.")
        return

    click.echo(f"\nMembers of {grp.name}:")
    click.echo("-" * 60)
    for m in members:
        click.echo(f"{m.handle:15s} | {m.display_name}")


def register_commands(cli):
    """Register member commands with main CLI."""
    cli.add_command(member_group)
