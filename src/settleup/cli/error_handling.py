"""CLI error handling helpers."""

import click

from settleup.domain.errors import DomainError
from settleup.domain.group import GroupService
from settleup.domain.entities import Group


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def resolve_group_or_exit(ctx: click.Context, group_service: GroupService, group: str) -> Group:
    """Resolve group name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return group_service.resolve_group(group)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
