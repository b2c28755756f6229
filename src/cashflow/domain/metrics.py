"""Financial metrics: monthly series and KPIs for the dashboard."""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from cashflow.domain.aggregation import aggregate_by_category, visible_amount
from cashflow.domain.classification import (
    CategoryLookup,
    index_categories,
    matches_focus,
)
from cashflow.domain.entities import (
    DashboardFilters,
    FinancialMetrics,
    FocusMode,
    KPISet,
    MonthlyMetric,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
BURN_RATE_WINDOW = 3


def build_monthly_series(
    income: Sequence[Decimal], expense: Sequence[Decimal]
) -> tuple[MonthlyMetric, ...]:
    """Build twelve monthly metrics with a running balance reset in January."""
    series = []
    running = ZERO
    for index in range(12):
        net = income[index] - expense[index]
        running += net
        series.append(
            MonthlyMetric(
                month=index + 1,
                income=income[index],
                expense=expense[index],
                net=net,
                accumulated=running,
            )
        )
    return tuple(series)


def calculate_runway(
    monthly_data: Sequence[MonthlyMetric], current_month_index: int
) -> float:
    """Months from the current month until the accumulated balance turns negative.

    The scan stops at December of the filtered year. When the balance stays
    non-negative through year end the runway is ``12 - current_month_index``.
    Otherwise the whole months before the first negative month are counted and
    the failing month adds ``previous accumulated / abs(net)`` as a fraction.
    The result is never negative.
    """
    first_negative = next(
        (
            index
            for index in range(current_month_index, 12)
            if monthly_data[index].accumulated < 0
        ),
        None,
    )
    if first_negative is None:
        return float(12 - current_month_index)

    prev_accum = monthly_data[first_negative - 1].accumulated if first_negative > 0 else ZERO
    loss = abs(monthly_data[first_negative].net)
    runway = Decimal(first_negative - current_month_index)
    if loss > 0:
        runway += prev_accum / loss
    return max(0.0, float(runway))


def calculate_burn_rate(
    monthly_data: Sequence[MonthlyMetric], current_month_index: int
) -> Decimal:
    """Average expense of the three months before the current one.

    Months with zero expense, and months before January, are left out of
    both the sum and the count.
    """
    spent = [
        monthly_data[index].expense
        for index in range(current_month_index - BURN_RATE_WINDOW, current_month_index)
        if index >= 0 and monthly_data[index].expense > 0
    ]
    if not spent:
        return ZERO
    return sum(spent, ZERO) / len(spent)


def calculate_delta(current_net: Decimal, last_net: Decimal) -> float:
    """Month-over-month change of net flow in percent; 0 when last month is 0."""
    if last_net == 0:
        return 0.0
    return float((current_net - last_net) / abs(last_net) * 100)


def calculate_net_margin(net: Decimal, income: Decimal) -> float:
    """Net margin in percent; 0 without income."""
    if income == 0:
        return 0.0
    return float(net / income * 100)


def compute_metrics(
    transactions: Iterable[Transaction],
    categories: CategoryLookup,
    filters: DashboardFilters,
    focus_mode: FocusMode = FocusMode.ALL,
    today: Optional[date] = None,
) -> FinancialMetrics:
    """Compute the monthly series and KPI set for the filtered year.

    Args:
        transactions: All known transactions
        categories: Categories used for grouping and focus filtering
        filters: Year, projected visibility and origin filter
        focus_mode: Restricts the figures to company or personal categories
        today: Reference date for "current month" (defaults to today)

    Returns:
        FinancialMetrics with twelve MonthlyMetric entries and the KPISet
    """
    today = today or date.today()
    index = index_categories(categories)
    focused = [txn for txn in transactions if matches_focus(txn, focus_mode, index)]

    totals = {
        TransactionType.INCOME: [ZERO] * 12,
        TransactionType.EXPENSE: [ZERO] * 12,
    }
    for txn_type, month_totals in totals.items():
        category_map = aggregate_by_category(
            focused, index, filters.year, filters.origin, txn_type
        )
        for months in category_map.values():
            for month, cell in months.items():
                month_totals[month - 1] += visible_amount(cell, filters.show_projected)

    monthly_data = build_monthly_series(
        totals[TransactionType.INCOME], totals[TransactionType.EXPENSE]
    )

    current_index = today.month - 1
    current = monthly_data[current_index]
    last_net = monthly_data[current_index - 1].net if current_index > 0 else ZERO

    kpi = KPISet(
        runway=calculate_runway(monthly_data, current_index),
        burn_rate=calculate_burn_rate(monthly_data, current_index),
        monthly_revenue=current.income,
        monthly_expense=current.expense,
        last_month_delta=calculate_delta(current.net, last_net),
        net_margin=calculate_net_margin(current.net, current.income),
        cash_on_hand=current.accumulated,
        net_cash_flow=current.net,
    )
    logger.debug(
        "Computed metrics for %s (focus=%s): runway=%.2f burn_rate=%s",
        filters.year,
        focus_mode.value,
        kpi.runway,
        kpi.burn_rate,
    )
    return FinancialMetrics(monthly_data=monthly_data, kpi=kpi)


def calculate_totals(
    transactions: Iterable[Transaction],
) -> tuple[Decimal, Decimal, Decimal]:
    """Total income, expense and net over any list of transactions."""
    income = ZERO
    expense = ZERO
    for txn in transactions:
        if txn.type == TransactionType.INCOME:
            income += txn.amount
        else:
            expense += txn.amount
    return income, expense, income - expense
