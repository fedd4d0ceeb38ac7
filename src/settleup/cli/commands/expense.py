"""Expense commands."""

import click
from settleup.domain.entities import Expense, SplitRule
from settleup.domain.errors import DomainError
from settleup.domain.expense import ExpenseService
from settleup.domain.group import GroupService
from settleup.cli.error_handling import handle_domain_error, resolve_group_or_exit
from settleup.utils.amount_parser import format_amount, parse_amount
from settleup.utils.date_parser import parse_date
from settleup.utils.weights_parser import parse_weights

SPLIT_CHOICES = click.Choice([rule.value for rule in SplitRule], case_sensitive=False)


@click.group("expense")
def expense_group():
    """Log and manage shared expenses."""
    pass


def _parse_inputs(ctx, amount, date, weights):
    """Parse amount, date and weight options, exiting on malformed input."""
    parsed_amount = parsed_date = parsed_weights = None
    try:
        if amount is not None:
            parsed_amount = parse_amount(amount)
        if date is not None:
            parsed_date = parse_date(date)
        if weights:
            parsed_weights = parse_weights(weights)
    except ValueError as e:
        handle_domain_error(ctx, e)
    return parsed_amount, parsed_date, parsed_weights


def _echo_expense(expense: Expense) -> None:
    click.echo(f"  Paid by: {expense.payer}")
    click.echo(f"  Amount: {format_amount(expense.amount, expense.currency)}")
    click.echo(f"  Split: {expense.split_rule.value}")
    for split in expense.splits:
        weight = ""
        if split.weight is not None:
            weight = f"  ({split.weight.normalize():f}{'%' if expense.split_rule == SplitRule.PERCENTAGE else ''})"
        click.echo(f"    {split.participant:15s} {format_amount(split.amount):>12s}{weight}")


@expense_group.command("add")
@click.argument("group", metavar="GROUP")
@click.option("--payer", required=True, help="Handle of the member who paid")
@click.option("--amount", required=True, help="Expense total (e.g., 42.50)")
@click.option("--description", "-d", required=True, help="What the money was spent on")
@click.option("--split", "split_rule", type=SPLIT_CHOICES, default="equal", show_default=True)
@click.option(
    "--with", "participants", multiple=True,
    help="Member sharing the cost (repeatable; defaults to everyone)",
)
@click.option(
    "--weight", "weights", multiple=True,
    help="PARTICIPANT=VALUE: amount, percentage or share count (repeatable)",
)
@click.option("--date", help="Expense date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--category", help="Category label")
@click.option("--currency", help="Currency code (defaults to the group's currency)")
@click.pass_context
def add_expense(
    ctx,
    group: str,
    payer: str,
    amount: str,
    description: str,
    split_rule: str,
    participants: tuple[str, ...],
    weights: tuple[str, ...],
    date: str | None,
    category: str | None,
    currency: str | None,
):
    """Log an expense paid by one member and shared by others.

    Examples:
        settleup expense add "Lisbon Trip" --payer alice --amount 90 -d "Dinner"
        settleup expense add 1 --payer bob --amount 100 -d Hotel --split percentage \\
            --weight alice=50 --weight bob=30 --weight carol=20
        settleup expense add 1 --payer carol --amount 60 -d Taxi --split shares \\
            --weight alice=2 --weight bob=1
    """
    db = ctx.obj["db"]
    service = ExpenseService(db)
    grp = resolve_group_or_exit(ctx, GroupService(db), group)
    parsed_amount, expense_date, parsed_weights = _parse_inputs(ctx, amount, date, weights)

    try:
        expense_id = service.add_expense(
            group_id=grp.id,
            description=description,
            amount=parsed_amount,
            payer=payer,
            split_rule=split_rule,
            participants=list(participants) or None,
            weights=parsed_weights,
            expense_date=expense_date,
            category=category,
            currency=currency,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    expense = service.get_expense(expense_id)
    click.echo(f"Created expense {expense_id}: {expense.description}")
    _echo_expense(expense)


@expense_group.command("edit")
@click.argument("expense_id", type=int)
@click.option("--payer", help="Handle of the member who paid")
@click.option("--amount", help="Expense total")
@click.option("--description", "-d", help="What the money was spent on")
@click.option("--split", "split_rule", type=SPLIT_CHOICES)
@click.option("--with", "participants", multiple=True, help="Member sharing the cost (repeatable)")
@click.option("--weight", "weights", multiple=True, help="PARTICIPANT=VALUE (repeatable)")
@click.option("--date", help="Expense date")
@click.option("--category", help="Category label, or empty string to clear")
@click.option("--currency", help="Currency code")
@click.pass_context
def edit_expense(
    ctx,
    expense_id: int,
    payer: str | None,
    amount: str | None,
    description: str | None,
    split_rule: str | None,
    participants: tuple[str, ...],
    weights: tuple[str, ...],
    date: str | None,
    category: str | None,
    currency: str | None,
):
    """Edit an expense. Its splits are recomputed from scratch.

    Only the options given change. Changing just the amount keeps the
    existing split rule and weights.

    Examples:
        settleup expense edit 3 --amount 120
        settleup expense edit 3 --split shares --weight alice=1 --weight bob=3
    """
    db = ctx.obj["db"]
    service = ExpenseService(db)
    parsed_amount, expense_date, parsed_weights = _parse_inputs(ctx, amount, date, weights)

    try:
        service.edit_expense(
            expense_id,
            description=description,
            amount=parsed_amount,
            payer=payer,
            split_rule=split_rule,
            participants=list(participants) or None,
            weights=parsed_weights,
            expense_date=expense_date,
            category=category,
            currency=currency,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    expense = service.get_expense(expense_id)
    click.echo(f"Updated expense {expense_id}: {expense.description}")
    _echo_expense(expense)


@expense_group.command("delete")
@click.argument("expense_id", type=int)
@click.pass_context
def delete_expense(ctx, expense_id: int):
    """Delete an expense and its splits."""
    db = ctx.obj["db"]
    service = ExpenseService(db)

    try:
        service.delete_expense(expense_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted expense {expense_id}")


@expense_group.command("show")
@click.argument("expense_id", type=int)
@click.pass_context
def show_expense(ctx, expense_id: int):
    """Show an expense with its splits."""
    db = ctx.obj["db"]
    service = ExpenseService(db)

    try:
        expense = service.require_expense(expense_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Expense {expense.id}: {expense.description} ({expense.expense_date})")
    if expense.category:
        click.echo(f"  Category: {expense.category}")
    _echo_expense(expense)


@expense_group.command("list")
@click.argument("group", metavar="GROUP")
@click.option("--currency", help="Only show expenses in this currency")
@click.pass_context
def list_expenses(ctx, group: str, currency: str | None):
    """List a group's expenses."""
    db = ctx.obj["db"]
    service = ExpenseService(db)
    grp = resolve_group_or_exit(ctx, GroupService(db), group)

    try:
        expenses = service.list_expenses(grp.id, currency)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if not expenses:
        click.echo(f"No expenses in group '{grp.name}'.")
        return

    click.echo(f"\nExpenses in {grp.name}:")
    click.echo("-" * 80)
    for e in expenses:
        click.echo(
            f"ID: {e.id:3d} | {e.expense_date} | {e.description[:24]:24s} | "
            f"{format_amount(e.amount, e.currency):>14s} | paid by {e.payer} | {e.split_rule.value}"
        )


def register_commands(cli):
    """Register expense commands with main CLI."""
    cli.add_command(expense_group)
