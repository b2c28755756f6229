"""Dashboard report commands."""

import calendar
from decimal import Decimal

import click
from cashflow.cli.options import (
    FOCUS_CHOICES,
    ORIGIN_CHOICES,
    build_filters,
    dashboard_filter_options,
    format_money,
)
from cashflow.domain.aggregation import visible_amount
from cashflow.domain.dashboard import DashboardService
from cashflow.domain.entities import (
    FinancialMetrics,
    FocusMode,
    TransactionStatus,
    TransactionType,
)

MONTH_LABELS = [calendar.month_abbr[m] for m in range(1, 13)]


def _month_header(label: str, width: int = 25) -> str:
    return f"{label:<{width}}" + "".join(f"{month:>11}" for month in MONTH_LABELS) + f"{'Total':>13}"


def _amount(value: Decimal) -> str:
    return f"{value:,.0f}" if value else "-"


def echo_metrics(metrics: FinancialMetrics) -> None:
    """Print the monthly series and KPI block."""
    click.echo(f"\n{'Month':<6} {'Income':>14} {'Expense':>14} {'Net':>14} {'Accumulated':>14}")
    click.echo("-" * 66)
    for row in metrics.monthly_data:
        click.echo(
            f"{MONTH_LABELS[row.month - 1]:<6} {format_money(row.income):>14} "
            f"{format_money(row.expense):>14} {format_money(row.net):>14} "
            f"{format_money(row.accumulated):>14}"
        )

    kpi = metrics.kpi
    click.echo("\nKPIs (current month):")
    click.echo(f"  Runway:          {kpi.runway:.1f} months")
    click.echo(f"  Burn rate:       {format_money(kpi.burn_rate)}")
    click.echo(f"  Revenue:         {format_money(kpi.monthly_revenue)}")
    click.echo(f"  Expenses:        {format_money(kpi.monthly_expense)}")
    click.echo(f"  Net cash flow:   {format_money(kpi.net_cash_flow)}")
    click.echo(f"  Cash on hand:    {format_money(kpi.cash_on_hand)}")
    click.echo(f"  vs. last month:  {kpi.last_month_delta:+.1f}%")
    click.echo(f"  Net margin:      {kpi.net_margin:.1f}%")


@click.command("summary")
@click.option("--year", type=int, help="Calendar year to show (default: current year)")
@click.option(
    "--origin",
    type=click.Choice(ORIGIN_CHOICES, case_sensitive=False),
    default="all",
    show_default=True,
    help="Restrict to business or personal origin",
)
@click.pass_context
def summary(ctx, year: int | None, origin: str):
    """Show monthly income, expenses and utility for a year.

    Totals include real and projected transactions alike.
    """
    db = ctx.obj["db"]
    service = DashboardService(db)
    filters = build_filters(year, False, origin)

    months = service.monthly_totals(filters)
    click.echo(f"\nCash flow {filters.year} (origin: {filters.origin.value})")
    click.echo(f"{'Month':<6} {'Income':>14} {'Expense':>14} {'Utility':>14}")
    click.echo("-" * 50)
    for row in months:
        click.echo(
            f"{MONTH_LABELS[row.month - 1]:<6} {format_money(row.income.total):>14} "
            f"{format_money(row.expense.total):>14} {format_money(row.utility.total):>14}"
        )

    income = sum((row.income.total for row in months), Decimal("0"))
    expense = sum((row.expense.total for row in months), Decimal("0"))
    click.echo("-" * 50)
    click.echo(
        f"{'Total':<6} {format_money(income):>14} {format_money(expense):>14} "
        f"{format_money(income - expense):>14}"
    )


@click.command("categories-report")
@dashboard_filter_options
@click.option("--type", "txn_type", type=click.Choice([t.value for t in TransactionType], case_sensitive=False), help="Only show income or expense rows")
@click.pass_context
def categories_report(ctx, year: int | None, real_only: bool, origin: str, txn_type: str | None):
    """Show the per-category month grid.

    Cells holding only projected amounts are marked with '*'.
    """
    db = ctx.obj["db"]
    service = DashboardService(db)
    filters = build_filters(year, real_only, origin)

    types = [TransactionType(txn_type.lower())] if txn_type else list(TransactionType)
    for transaction_type in types:
        grid = service.category_months(filters, transaction_type)
        click.echo(f"\n{transaction_type.value.upper()} {filters.year}")
        click.echo(_month_header("Category"))
        if not grid:
            click.echo("  (no rows)")
            continue

        for name in sorted(grid):
            cells = grid[name]
            line = f"{name[:24]:<25}"
            total = Decimal("0")
            for month in range(1, 13):
                cell = cells.get(month)
                if cell is None:
                    line += f"{'-':>11}"
                    continue
                amount = visible_amount(cell, filters.show_projected)
                total += amount
                marker = "*" if cell.status == TransactionStatus.PROJECTED and amount else ""
                line += f"{_amount(amount) + marker:>11}"
            click.echo(line + f"{_amount(total):>13}")


@click.command("metrics")
@dashboard_filter_options
@click.option(
    "--focus",
    type=click.Choice(FOCUS_CHOICES, case_sensitive=False),
    default=FocusMode.ALL.value,
    show_default=True,
    help="Restrict to company or personal categories",
)
@click.pass_context
def metrics(ctx, year: int | None, real_only: bool, origin: str, focus: str):
    """Show the monthly series and KPIs (runway, burn rate, margin...)."""
    db = ctx.obj["db"]
    service = DashboardService(db)
    filters = build_filters(year, real_only, origin)

    result = service.metrics(filters, FocusMode(focus.lower()))
    click.echo(f"\nMetrics {filters.year} (focus: {focus.lower()})")
    echo_metrics(result)


@click.command("clients")
@dashboard_filter_options
@click.option("--limit", type=int, default=10, show_default=True, help="Number of clients to show")
@click.pass_context
def clients(ctx, year: int | None, real_only: bool, origin: str, limit: int):
    """Rank business income by client."""
    db = ctx.obj["db"]
    service = DashboardService(db)
    filters = build_filters(year, real_only, origin)

    ranking = service.client_revenue(filters)
    if not ranking:
        click.echo("No client revenue found.")
        return

    click.echo(f"\nTop clients {filters.year}")
    click.echo(f"{'#':<4} {'Client':<35} {'Total':>16}")
    click.echo("-" * 57)
    for position, client in enumerate(ranking[:limit], start=1):
        click.echo(f"{position:<4} {client.client_name[:35]:<35} {format_money(client.yearly_total):>16}")


def register_commands(cli):
    """Register dashboard commands with main CLI."""
    cli.add_command(summary)
    cli.add_command(categories_report)
    cli.add_command(metrics)
    cli.add_command(clients)
