"""Transaction management commands."""

import click
from cashflow.cli.error_handling import handle_domain_error
from cashflow.cli.options import (
    format_money,
    parse_amount_or_exit,
    parse_date_or_exit,
)
from cashflow.domain.aggregation import UNCATEGORIZED
from cashflow.domain.category import CategoryService
from cashflow.domain.entities import PaymentStatus, TransactionStatus
from cashflow.domain.errors import DomainError
from cashflow.domain.metrics import calculate_totals
from cashflow.domain.transaction import TransactionService


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--year", type=int, help="Only show one calendar year")
@click.option("--category", help="Category name")
@click.option("--uncategorized", is_flag=True, help="Show only uncategorized transactions")
@click.pass_context
def list_transactions(ctx, year: int | None, category: str | None, uncategorized: bool):
    """View transactions with optional filters."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    category_service = CategoryService(db)

    categories = {cat.id: cat for cat in category_service.list_categories()}

    category_id = None
    if category:
        matches = [cat for cat in categories.values() if cat.name.lower() == category.strip().lower()]
        if not matches:
            click.echo(f"Error: Category '{category}' not found", err=True)
            ctx.exit(1)
        category_id = matches[0].id

    transactions = service.list_transactions(
        year=year, category_id=category_id, uncategorized=uncategorized
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Amount':>14} {'Type':<8} {'Status':<10} "
        f"{'Category':<25} {'Description':<30}"
    )
    click.echo("-" * 110)
    for txn in transactions:
        cat = categories.get(txn.category_id) if txn.category_id is not None else None
        category_name = cat.name if cat else UNCATEGORIZED
        status = txn.status.value
        if txn.payment_status == PaymentStatus.PENDING:
            status += "*"
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {format_money(txn.amount):>14} "
            f"{txn.type.value:<8} {status:<10} {category_name[:25]:<25} "
            f"{(txn.description or '')[:30]:<30}"
        )

    income, expense, net = calculate_totals(transactions)
    click.echo("-" * 110)
    click.echo(
        f"Income: {format_money(income)} | Expenses: {format_money(expense)} | "
        f"Net: {format_money(net)} | Count: {len(transactions)}"
    )


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--date", "date_str", help="Transaction date")
@click.option("--amount", help="Positive amount")
@click.option("--description", help="Transaction description")
@click.option("--category", help="Category name, or empty string to clear")
@click.option("--status", type=click.Choice([s.value for s in TransactionStatus], case_sensitive=False), help="Real or projected")
@click.option("--payment-status", type=click.Choice([p.value for p in PaymentStatus], case_sensitive=False), help="Confirmed or pending")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    date_str: str | None,
    amount: str | None,
    description: str | None,
    category: str | None,
    status: str | None,
    payment_status: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. Use --category "" to clear the category.

    Examples:
        cashflow transaction update 1 --amount 750
        cashflow transaction update 1 --status real --payment-status confirmed
        cashflow transaction update 1 --category ""  # Clear category
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    category_service = CategoryService(db)

    txn = transaction_service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    fields = {}
    if date_str is not None:
        fields["date"] = parse_date_or_exit(ctx, date_str, "date format")
    if amount is not None:
        fields["amount"] = parse_amount_or_exit(ctx, amount)
    if description is not None:
        fields["description"] = description
    if status is not None:
        fields["status"] = TransactionStatus(status.lower())
    if payment_status is not None:
        fields["payment_status"] = PaymentStatus(payment_status.lower())
    if category is not None:
        if category == "":
            fields["category_id"] = None
        else:
            try:
                fields["category_id"] = category_service.require_category_by_name(
                    category, txn.type
                ).id
            except DomainError as e:
                handle_domain_error(ctx, e)

    if not fields:
        click.echo("Error: Nothing to update", err=True)
        ctx.exit(1)

    try:
        transaction_service.update_transaction(transaction_id, **fields)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction.

    Examples:
        cashflow transaction delete 1 --yes
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    txn = transaction_service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes:
        click.echo(f"  Date: {txn.date}")
        click.echo(f"  Amount: {format_money(txn.amount)} ({txn.type.value})")
        if txn.description:
            click.echo(f"  Description: {txn.description}")
        click.confirm("Delete this transaction?", abort=True)

    try:
        transaction_service.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


@click.command("copy-year")
@click.argument("from_year", type=int)
@click.argument("to_year", type=int)
@click.pass_context
def copy_year(ctx, from_year: int, to_year: int) -> None:
    """Copy a year's transactions into another year as projections.

    Examples:
        cashflow copy-year 2024 2025
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    if from_year == to_year:
        click.echo("Error: Source and target year must differ", err=True)
        ctx.exit(1)

    created = service.copy_year(from_year, to_year)
    click.echo(f"Copied {len(created)} transaction(s) from {from_year} to {to_year} as projections")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
    cli.add_command(copy_year)
