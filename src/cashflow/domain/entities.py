"""Domain model entities for cashflow.

These are pure data classes representing business concepts, independent of
database schema. The engines in this package only ever see these entities,
so they stay usable with any storage backend (or none at all).
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Direction of a transaction; the amount itself is always positive."""

    INCOME = "income"
    EXPENSE = "expense"


class TransactionStatus(str, Enum):
    """Whether an amount is confirmed or forecast."""

    REAL = "real"
    PROJECTED = "projected"


class PaymentStatus(str, Enum):
    """Payment confirmation state, independent of TransactionStatus."""

    CONFIRMED = "confirmed"
    PENDING = "pending"


class Origin(str, Enum):
    """Ledger a transaction belongs to."""

    BUSINESS = "business"
    PERSONAL = "personal"


class OriginFilter(str, Enum):
    """Origin filter for dashboard views."""

    ALL = "all"
    BUSINESS = "business"
    PERSONAL = "personal"


class CategoryLevel(str, Enum):
    """Top-level classification of a category."""

    EMPRESA = "empresa"
    PERSONAL = "personal"


class PersonalSublevel(str, Enum):
    """Sub-bucket for personal categories."""

    CASA = "casa"
    VIAJES = "viajes"
    DEPORTE = "deporte"
    PENSIONES = "pensiones"
    OTROS = "otros"


class FocusMode(str, Enum):
    """Restricts metrics to company or personal categories."""

    ALL = "all"
    COMPANY = "company"
    PERSONAL = "personal"


class SimulationVariableType(str, Enum):
    """Kinds of what-if changes a simulation can layer over real data."""

    NEW_EXPENSE = "new_expense"
    NEW_INCOME = "new_income"
    MODIFY_AMOUNT = "modify_amount"
    TOGGLE_ACTIVE = "toggle_active"


@dataclass(frozen=True)
class InstallmentInfo:
    """Metadata linking one installment to the plan it belongs to."""

    total_installments: int
    current_installment: int
    installment_amount: Decimal
    is_equal_installments: bool = True
    parent_transaction_id: Optional[int] = None


@dataclass(frozen=True)
class Category:
    """Category domain entity.

    Names are unique per type only: the same name may exist once as an income
    category and once as an expense category.
    """

    id: int
    name: str
    type: TransactionType
    level: CategoryLevel = CategoryLevel.EMPRESA
    sublevel: Optional[PersonalSublevel] = None
    color: Optional[str] = None
    is_fixed: bool = False
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    date: date
    amount: Decimal
    type: TransactionType
    status: TransactionStatus = TransactionStatus.REAL
    payment_status: PaymentStatus = PaymentStatus.CONFIRMED
    origin: Origin = Origin.BUSINESS
    category_id: Optional[int] = None
    description: Optional[str] = None
    installment: Optional[InstallmentInfo] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class DashboardFilters:
    """Filters shared by every dashboard view."""

    year: int
    show_projected: bool = True
    origin: OriginFilter = OriginFilter.ALL


@dataclass(frozen=True)
class Breakdown:
    """Real, projected and combined views of one figure."""

    real: Decimal = Decimal("0")
    projected: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        return self.real + self.projected


@dataclass(frozen=True)
class MonthlyTotals:
    """Income, expense and utility of a single month."""

    month: int
    year: int
    income: Breakdown
    expense: Breakdown

    @property
    def utility(self) -> Breakdown:
        return Breakdown(
            real=self.income.real - self.expense.real,
            projected=self.income.projected - self.expense.projected,
        )


@dataclass(frozen=True)
class CategoryCell:
    """Aggregate of every transaction landing in one (category, month) cell."""

    amount: Decimal
    status: TransactionStatus
    real: Decimal = Decimal("0")
    projected: Decimal = Decimal("0")
    transaction_id: Optional[int] = None
    level: CategoryLevel = CategoryLevel.EMPRESA
    sublevel: Optional[PersonalSublevel] = None
    color: Optional[str] = None


@dataclass(frozen=True)
class Classification:
    """Resolved level/sublevel/color of a transaction."""

    level: CategoryLevel
    sublevel: Optional[PersonalSublevel] = None
    color: Optional[str] = None


@dataclass(frozen=True)
class MonthlyMetric:
    """Derived month figures; never persisted."""

    month: int
    income: Decimal
    expense: Decimal
    net: Decimal
    accumulated: Decimal


@dataclass(frozen=True)
class KPISet:
    """Scalar indicators for the current real-world month."""

    runway: float
    burn_rate: Decimal
    monthly_revenue: Decimal
    monthly_expense: Decimal
    last_month_delta: float
    net_margin: float
    cash_on_hand: Decimal
    net_cash_flow: Decimal


@dataclass(frozen=True)
class FinancialMetrics:
    """Twelve monthly metrics plus the KPI set."""

    monthly_data: tuple[MonthlyMetric, ...]
    kpi: KPISet


@dataclass(frozen=True)
class ClientRevenue:
    """Business income attributed to one client over a year."""

    client_name: str
    monthly_revenue: dict[int, Decimal]
    yearly_total: Decimal


@dataclass(frozen=True)
class ImportedRow:
    """Candidate transaction read from a spreadsheet import."""

    fingerprint: str
    date: date
    amount: Decimal
    category_name: str
    type: TransactionType
    description: str = ""
    status: TransactionStatus = TransactionStatus.REAL
    origin: Origin = Origin.BUSINESS
    is_duplicate: bool = False


@dataclass(frozen=True)
class ImportStats:
    """Summary of an import session."""

    total_rows: int = 0
    new_categories: tuple[str, ...] = ()
    potential_duplicates: int = 0
    estimated_total_amount: Decimal = Decimal("0")


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing a spreadsheet buffer; never raised, always returned."""

    success: bool
    rows: tuple[ImportedRow, ...] = ()
    stats: ImportStats = field(default_factory=ImportStats)
    year: Optional[int] = None
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class SimulationVariable:
    """One what-if change applied on top of the real transactions.

    ``date`` is only used by new-income/new-expense variables.
    """

    id: str
    type: SimulationVariableType
    name: str
    date: Optional[date]
    amount: Optional[Decimal] = None
    description: Optional[str] = None
    target_transaction_id: Optional[int] = None
    category_id: Optional[int] = None
    active: bool = True
