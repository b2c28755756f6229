"""CLI helpers for dashboard filters and value parsing."""

from datetime import date
from decimal import Decimal
from functools import wraps

import click

from cashflow.domain.entities import (
    DashboardFilters,
    FocusMode,
    OriginFilter,
    TransactionType,
)
from cashflow.utils.amount_parser import parse_amount
from cashflow.utils.date_parser import parse_date

TYPE_CHOICES = [t.value for t in TransactionType]
ORIGIN_CHOICES = [o.value for o in OriginFilter]
FOCUS_CHOICES = [f.value for f in FocusMode]


def dashboard_filter_options(func):
    """Add --year, --real-only and --origin options to a dashboard command."""

    @click.option("--year", type=int, help="Calendar year to show (default: current year)")
    @click.option(
        "--real-only",
        is_flag=True,
        help="Hide cells that only hold projected amounts",
    )
    @click.option(
        "--origin",
        type=click.Choice(ORIGIN_CHOICES, case_sensitive=False),
        default=OriginFilter.ALL.value,
        show_default=True,
        help="Restrict to business or personal origin",
    )
    @wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)

    return wrapper


def build_filters(year: int | None, real_only: bool, origin: str) -> DashboardFilters:
    """Build dashboard filters from CLI option values."""
    return DashboardFilters(
        year=year or date.today().year,
        show_projected=not real_only,
        origin=OriginFilter(origin.lower()),
    )


def parse_date_or_exit(ctx: click.Context, value: str, label: str = "date") -> date:
    """Parse a date option, or exit with a CLI error."""
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_amount_or_exit(ctx: click.Context, value: str) -> Decimal:
    """Parse an amount option, or exit with a CLI error."""
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


def format_money(amount: Decimal) -> str:
    """Format an amount for table output."""
    return f"${amount:,.2f}"
