"""Monthly and per-category aggregation of transactions."""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Sequence

from cashflow.domain.classification import (
    CategoryLookup,
    classify,
    index_categories,
    matches_origin,
)
from cashflow.domain.entities import (
    Breakdown,
    CategoryCell,
    CategoryLevel,
    ClientRevenue,
    DashboardFilters,
    MonthlyTotals,
    OriginFilter,
    Transaction,
    TransactionStatus,
    TransactionType,
)

UNCATEGORIZED = "Sin categoría"
UNNAMED_CLIENT = "Cliente sin nombre"

ZERO = Decimal("0")

CategoryMonthMap = dict[str, dict[int, CategoryCell]]


def in_year(transaction: Transaction, year: int) -> bool:
    """Calendar-year membership."""
    return transaction.date.year == year


def group_name(transaction: Transaction, categories: CategoryLookup) -> str:
    """Grouping key: category name, else description, else placeholder."""
    index = index_categories(categories)
    category = index.get(transaction.category_id) if transaction.category_id is not None else None
    if category is not None and category.name:
        return category.name
    if transaction.description:
        return transaction.description
    return UNCATEGORIZED


def aggregate_by_month(
    transactions: Iterable[Transaction],
    year: int,
    origin_filter: OriginFilter = OriginFilter.ALL,
    categories: CategoryLookup = (),
) -> list[MonthlyTotals]:
    """Sum income and expense per month, split by real/projected.

    Args:
        transactions: Transactions to aggregate
        year: Calendar year to keep
        origin_filter: Origin filter, resolved through the linked category
        categories: Categories used to resolve the effective origin

    Returns:
        Twelve MonthlyTotals, January first
    """
    index = index_categories(categories)
    sums: dict[tuple[int, TransactionType, TransactionStatus], Decimal] = defaultdict(
        lambda: ZERO
    )

    for txn in transactions:
        if not in_year(txn, year) or not matches_origin(txn, origin_filter, index):
            continue
        sums[(txn.date.month, txn.type, txn.status)] += txn.amount

    def breakdown(month: int, txn_type: TransactionType) -> Breakdown:
        return Breakdown(
            real=sums[(month, txn_type, TransactionStatus.REAL)],
            projected=sums[(month, txn_type, TransactionStatus.PROJECTED)],
        )

    return [
        MonthlyTotals(
            month=month,
            year=year,
            income=breakdown(month, TransactionType.INCOME),
            expense=breakdown(month, TransactionType.EXPENSE),
        )
        for month in range(1, 13)
    ]


def merge_cell(existing: CategoryCell, txn: Transaction, **classification) -> CategoryCell:
    """Fold one more transaction into a cell; a real contributor wins the status."""
    is_real = txn.status == TransactionStatus.REAL
    return CategoryCell(
        amount=existing.amount + txn.amount,
        status=TransactionStatus.REAL if is_real else existing.status,
        real=existing.real + (txn.amount if is_real else ZERO),
        projected=existing.projected + (ZERO if is_real else txn.amount),
        transaction_id=txn.id,
        **classification,
    )


def aggregate_by_category(
    transactions: Iterable[Transaction],
    categories: CategoryLookup,
    year: int,
    origin_filter: OriginFilter,
    txn_type: TransactionType,
) -> CategoryMonthMap:
    """Group one transaction type by category name and month.

    Cells sum their amounts; the cell status is ``real`` as soon as any
    contributing transaction is real.

    Returns:
        Mapping of category name to a mapping of month (1-12) to CategoryCell
    """
    index = index_categories(categories)
    category_map: CategoryMonthMap = {}

    for txn in transactions:
        if txn.type != txn_type or not in_year(txn, year):
            continue
        if not matches_origin(txn, origin_filter, index):
            continue

        name = group_name(txn, index)
        resolved = classify(txn, index)
        classification = {
            "level": resolved.level,
            "sublevel": resolved.sublevel,
            "color": resolved.color,
        }
        month_data = category_map.setdefault(name, {})
        month = txn.date.month
        existing = month_data.get(month)

        if existing is not None:
            month_data[month] = merge_cell(existing, txn, **classification)
        else:
            is_real = txn.status == TransactionStatus.REAL
            month_data[month] = CategoryCell(
                amount=txn.amount,
                status=txn.status,
                real=txn.amount if is_real else ZERO,
                projected=ZERO if is_real else txn.amount,
                transaction_id=txn.id,
                **classification,
            )

    return category_map


def visible_amount(cell: CategoryCell, show_projected: bool) -> Decimal:
    """Amount a cell contributes to a view; projected-only cells hide in real-only views."""
    if show_projected or cell.status == TransactionStatus.REAL:
        return cell.amount
    return ZERO


def client_revenue(
    transactions: Sequence[Transaction],
    categories: CategoryLookup,
    filters: DashboardFilters,
) -> list[ClientRevenue]:
    """Rank business income by client for the filtered year.

    Only business-origin income counts, and only when its category is at the
    company level (or missing). Projected income is left out when the filters
    hide projections.
    """
    index = index_categories(categories)
    monthly: dict[str, dict[int, Decimal]] = {}

    for txn in transactions:
        if txn.type != TransactionType.INCOME or not in_year(txn, filters.year):
            continue
        if txn.origin.value != OriginFilter.BUSINESS.value:
            continue
        category = index.get(txn.category_id) if txn.category_id is not None else None
        if category is not None and category.level != CategoryLevel.EMPRESA:
            continue
        if not filters.show_projected and txn.status != TransactionStatus.REAL:
            continue

        client = txn.description or (category.name if category else None) or UNNAMED_CLIENT
        months = monthly.setdefault(client, {})
        months[txn.date.month] = months.get(txn.date.month, ZERO) + txn.amount

    results = [
        ClientRevenue(
            client_name=name,
            monthly_revenue=months,
            yearly_total=sum(months.values(), ZERO),
        )
        for name, months in monthly.items()
    ]
    return sorted(results, key=lambda item: item.yearly_total, reverse=True)
