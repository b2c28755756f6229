"""Dashboard domain service."""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from cashflow.database.base import Database
from cashflow.domain.aggregation import (
    CategoryMonthMap,
    aggregate_by_category,
    aggregate_by_month,
    client_revenue,
)
from cashflow.domain.entities import (
    Category,
    ClientRevenue,
    DashboardFilters,
    FinancialMetrics,
    FocusMode,
    MonthlyTotals,
    SimulationVariable,
    Transaction,
    TransactionType,
)
from cashflow.domain.metrics import compute_metrics
from cashflow.domain.simulation import apply_overlay


@dataclass(frozen=True)
class DashboardSnapshot:
    """Transactions and categories read together from the store."""

    transactions: tuple[Transaction, ...]
    categories: tuple[Category, ...]


class DashboardService:
    """Service building dashboard views from the stored ledger.

    Every view reads one snapshot of the store and hands it to the pure
    aggregation and metrics functions.
    """

    def __init__(self, db: Database):
        """Initialize dashboard service.

        Args:
            db: Database instance
        """
        self.db = db

    def load_snapshot(self) -> DashboardSnapshot:
        """Read all transactions and categories."""
        return DashboardSnapshot(
            transactions=tuple(self.db.list_transactions()),
            categories=tuple(self.db.list_categories()),
        )

    def monthly_totals(self, filters: DashboardFilters) -> list[MonthlyTotals]:
        """Twelve months of income/expense for the filtered year."""
        snapshot = self.load_snapshot()
        return aggregate_by_month(
            snapshot.transactions,
            filters.year,
            filters.origin,
            snapshot.categories,
        )

    def category_months(
        self, filters: DashboardFilters, transaction_type: TransactionType
    ) -> CategoryMonthMap:
        """Per-category month grid for one transaction type."""
        snapshot = self.load_snapshot()
        return aggregate_by_category(
            snapshot.transactions,
            snapshot.categories,
            filters.year,
            filters.origin,
            transaction_type,
        )

    def metrics(
        self,
        filters: DashboardFilters,
        focus_mode: FocusMode = FocusMode.ALL,
        today: Optional[date] = None,
        variables: Sequence[SimulationVariable] = (),
    ) -> FinancialMetrics:
        """Monthly series and KPIs, optionally over a simulated scenario."""
        snapshot = self.load_snapshot()
        transactions = snapshot.transactions
        if variables:
            transactions = apply_overlay(transactions, variables)
        return compute_metrics(
            transactions, snapshot.categories, filters, focus_mode, today=today
        )

    def client_revenue(self, filters: DashboardFilters) -> list[ClientRevenue]:
        """Business income ranked by client."""
        snapshot = self.load_snapshot()
        return client_revenue(snapshot.transactions, snapshot.categories, filters)
