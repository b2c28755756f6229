"""Add transaction command."""

import click
from cashflow.cli.error_handling import handle_domain_error
from cashflow.cli.options import (
    TYPE_CHOICES,
    format_money,
    parse_amount_or_exit,
    parse_date_or_exit,
)
from cashflow.domain.category import CategoryService
from cashflow.domain.entities import (
    Origin,
    PaymentStatus,
    TransactionStatus,
    TransactionType,
)
from cashflow.domain.errors import DomainError
from cashflow.domain.transaction import TransactionService


@click.command("add")
@click.option(
    "--date",
    "date_str",
    required=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'next month')",
)
@click.option("--amount", required=True, help="Positive amount (e.g., 1500 or 1,250.50)")
@click.option("--type", "txn_type", type=click.Choice(TYPE_CHOICES, case_sensitive=False), default="expense", show_default=True, help="Income or expense")
@click.option("--category", help="Category name (matched case-insensitively within the type)")
@click.option("--description", help="Transaction description")
@click.option("--projected", is_flag=True, help="Record as a projection instead of a real movement")
@click.option("--pending", is_flag=True, help="Mark payment as pending")
@click.option("--personal", is_flag=True, help="Record on the personal ledger")
@click.option("--installments", type=int, help="Split into N monthly installments")
@click.option("--full-amount-each", is_flag=True, help="With --installments, charge the full amount every month")
@click.pass_context
def add_transaction(
    ctx,
    date_str: str,
    amount: str,
    txn_type: str,
    category: str | None,
    description: str | None,
    projected: bool,
    pending: bool,
    personal: bool,
    installments: int | None,
    full_amount_each: bool,
):
    """Add a transaction manually.

    Examples:
        cashflow add --date 2025-03-01 --amount 1500 --type income --category "Cliente ACME"
        cashflow add --date today --amount 1200 --category Equipos --installments 6
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    category_service = CategoryService(db)

    txn_date = parse_date_or_exit(ctx, date_str, "date format")
    txn_amount = parse_amount_or_exit(ctx, amount)
    transaction_type = TransactionType(txn_type.lower())
    origin = Origin.PERSONAL if personal else Origin.BUSINESS

    category_id = None
    if category:
        try:
            category_id = category_service.require_category_by_name(
                category, transaction_type
            ).id
        except DomainError as e:
            handle_domain_error(ctx, e)

    try:
        if installments is not None:
            ids = transaction_service.create_installments(
                start_date=txn_date,
                total_amount=txn_amount,
                total_installments=installments,
                transaction_type=transaction_type,
                equal_split=not full_amount_each,
                payment_status=PaymentStatus.PENDING if pending else PaymentStatus.CONFIRMED,
                origin=origin,
                category_id=category_id,
                description=description or "",
            )
            click.echo(f"Created {len(ids)} installments (IDs: {ids[0]}-{ids[-1]})")
            return

        transaction_id = transaction_service.create_transaction(
            date=txn_date,
            amount=txn_amount,
            transaction_type=transaction_type,
            status=TransactionStatus.PROJECTED if projected else TransactionStatus.REAL,
            payment_status=PaymentStatus.PENDING if pending else PaymentStatus.CONFIRMED,
            origin=origin,
            category_id=category_id,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Date: {txn_date}")
    click.echo(f"  Amount: {format_money(txn_amount)} ({transaction_type.value})")
    if description:
        click.echo(f"  Description: {description}")
    if category:
        click.echo(f"  Category: {category}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
