"""Settlement commands."""

import click
from settleup.domain.errors import DomainError
from settleup.domain.group import GroupService
from settleup.domain.ledger import LedgerService
from settleup.cli.error_handling import handle_domain_error, resolve_group_or_exit
from settleup.utils.amount_parser import format_amount, parse_amount
from settleup.utils.date_parser import parse_date


@click.group("settlement")
def settlement_group():
    """Record and list repayments between members."""
    pass


@settlement_group.command("add")
@click.argument("group", metavar="GROUP")
@click.option("--from", "from_participant", required=True, help="Handle of the member paying")
@click.option("--to", "to_participant", required=True, help="Handle of the member being paid")
@click.option("--amount", required=True, help="Amount paid")
@click.option("--currency", help="Currency code (defaults to the group's currency)")
@click.option("--date", help="Payment date (YYYY-MM-DD or relative like 'today')")
@click.option("--key", "idempotency_key", help="Idempotency key; a repeated key is rejected")
@click.option("--note", help="Free-text note")
@click.pass_context
def add_settlement(
    ctx,
    group: str,
    from_participant: str,
    to_participant: str,
    amount: str,
    currency: str | None,
    date: str | None,
    idempotency_key: str | None,
    note: str | None,
):
    """Record a repayment from one member to another.

    Examples:
        settleup settlement add "Lisbon Trip" --from bob --to alice --amount 30
        settleup settlement add 1 --from carol --to alice --amount 30 --key bank-ref-8812
    """
    db = ctx.obj["db"]
    service = LedgerService(db)
    grp = resolve_group_or_exit(ctx, GroupService(db), group)

    try:
        settlement_id = service.record_settlement(
            group_id=grp.id,
            from_participant=from_participant,
            to_participant=to_participant,
            amount=parse_amount(amount),
            currency=currency,
            settled_at=parse_date(date) if date is not None else None,
            idempotency_key=idempotency_key,
            note=note,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    settlement = db.get_settlement(settlement_id)
    click.echo(
        f"Recorded settlement {settlement_id}: {settlement.from_participant} paid "
        f"{settlement.to_participant} {format_amount(settlement.amount, settlement.currency)}"
    )


@settlement_group.command("list")
@click.argument("group", metavar="GROUP")
@click.option("--currency", help="Only show settlements in this currency")
@click.pass_context
def list_settlements(ctx, group: str, currency: str | None):
    """List a group's recorded settlements."""
    db = ctx.obj["db"]
    service = LedgerService(db)
    grp = resolve_group_or_exit(ctx, GroupService(db), group)

    try:
        settlements = service.list_settlements(grp.id, currency)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if not settlements:
        click.echo(f"No settlements in group '{grp.name}'.")
        return

    click.echo(f"\nSettlements in {grp.name}:")
    click.echo("-" * 70)
    for s in settlements:
        line = (
            f"ID: {s.id:3d} | {s.settled_at} | {s.from_participant} -> {s.to_participant} | "
            f"{format_amount(s.amount, s.currency)}"
        )
        if s.note:
            line += f" | {s.note}"
        click.echo(line)


def register_commands(cli):
    """Register settlement commands with main CLI."""
    cli.add_command(settlement_group)
