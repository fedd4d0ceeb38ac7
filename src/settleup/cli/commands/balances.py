"""Balance and settle-up commands."""

import click
from decimal import Decimal
from settleup.domain.errors import DomainError
from settleup.domain.group import GroupService
from settleup.domain.ledger import LedgerService
from settleup.domain.settlement import DEFAULT_EPSILON
from settleup.cli.error_handling import handle_domain_error, resolve_group_or_exit
from settleup.utils.amount_parser import format_amount, parse_amount
from settleup.utils.date_parser import parse_date


def _signed(amount: Decimal) -> str:
    text = format_amount(abs(amount))
    if amount > 0:
        return f"+{text}"
    if amount < 0:
        return f"-{text}"
    return text


@click.command("balances")
@click.argument("group", metavar="GROUP")
@click.option("--currency", help="Currency code (defaults to the group's currency)")
@click.pass_context
def show_balances(ctx, group: str, currency: str | None):
    """Show each member's net balance.

    Positive means the member is owed money, negative means they owe.

    Examples:
        settleup balances "Lisbon Trip"
        settleup balances 1 --currency EUR
    """
    db = ctx.obj["db"]
    service = LedgerService(db)
    grp = resolve_group_or_exit(ctx, GroupService(db), group)
    code = (currency or grp.currency).upper()

    try:
        rows = service.balance_report(grp.id, code)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if not rows:
        click.echo("No balances yet.")
        return

    click.echo(f"\nBalances for {grp.name} ({code}):")
    click.echo("-" * 80)
    click.echo(
        f"{'Member':20s} {'Paid':>12s} {'Share':>12s} {'Sent':>10s} {'Received':>10s} {'Net':>12s}"
    )
    for row in rows:
        click.echo(
            f"{row.display_name[:20]:20s} {format_amount(row.paid):>12s} "
            f"{format_amount(row.share):>12s} {format_amount(row.sent):>10s} "
            f"{format_amount(row.received):>10s} {_signed(row.net):>12s}"
        )


@click.command("settle-up")
@click.argument("group", metavar="GROUP")
@click.option("--currency", help="Currency code (defaults to the group's currency)")
@click.option(
    "--epsilon",
    default=str(DEFAULT_EPSILON),
    show_default=True,
    help="Balances within this amount of zero count as settled",
)
@click.option("--record", is_flag=True, help="Record every planned transfer as a settlement")
@click.option("--date", help="Settlement date when recording (defaults to today)")
@click.pass_context
def settle_up(ctx, group: str, currency: str | None, epsilon: str, record: bool, date: str | None):
    """Show the fewest payments that settle everyone up.

    With --record, each planned payment is stored as a settlement.

    Examples:
        settleup settle-up "Lisbon Trip"
        settleup settle-up 1 --record
    """
    db = ctx.obj["db"]
    service = LedgerService(db)
    grp = resolve_group_or_exit(ctx, GroupService(db), group)
    code = (currency or grp.currency).upper()

    try:
        tolerance = parse_amount(epsilon)
        settled_at = parse_date(date) if date is not None else None
        if record:
            transfers = [t for t, _ in service.settle_up(grp.id, code, tolerance, settled_at)]
        else:
            transfers = service.plan(grp.id, code, tolerance)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not transfers:
        click.echo(f"Everyone in '{grp.name}' is settled up.")
        return

    heading = "Recorded payments" if record else "Suggested payments"
    click.echo(f"\n{heading} for {grp.name} ({code}):")
    click.echo("-" * 60)
    for t in transfers:
        click.echo(f"{t.from_participant} pays {t.to_participant} {format_amount(t.amount, code)}")
    click.echo(f"\n{len(transfers)} payment{'s' if len(transfers) != 1 else ''}")


def register_commands(cli):
    """Register balance commands with main CLI."""
    cli.add_command(show_balances)
    cli.add_command(settle_up)
