"""Main CLI entry point."""

import logging

import click
from settleup.database.factories import DB_PATH_ENVVAR, create_sqlite_database

# Import and register all commands at module level
from settleup.cli.commands import (
    group,
    member,
    expense,
    settlement,
    balances,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENVVAR} environment variable)",
    envvar=DB_PATH_ENVVAR,
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Settleup - Shared expense tracking for groups.

    Log who paid for what, split costs equally, by exact amounts, by
    percentage or by shares, and work out the fewest payments that settle
    everyone up.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
group.register_commands(cli)
member.register_commands(cli)
expense.register_commands(cli)
settlement.register_commands(cli)
balances.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
