"""Category classification for transactions."""

from typing import Iterable, Mapping, Optional, Union

from cashflow.domain.entities import (
    Category,
    CategoryLevel,
    Classification,
    FocusMode,
    Origin,
    OriginFilter,
    PersonalSublevel,
    Transaction,
)

SUBLEVEL_COLORS: dict[PersonalSublevel, str] = {
    PersonalSublevel.CASA: "#8B5CF6",
    PersonalSublevel.VIAJES: "#F59E0B",
    PersonalSublevel.DEPORTE: "#10B981",
    PersonalSublevel.PENSIONES: "#EF4444",
    PersonalSublevel.OTROS: "#6B7280",
}

FOCUS_LEVELS: dict[FocusMode, CategoryLevel] = {
    FocusMode.COMPANY: CategoryLevel.EMPRESA,
    FocusMode.PERSONAL: CategoryLevel.PERSONAL,
}

CategoryLookup = Union[Mapping[int, Category], Iterable[Category]]


def index_categories(categories: CategoryLookup) -> Mapping[int, Category]:
    """Return categories keyed by ID, accepting an existing mapping as-is."""
    if isinstance(categories, Mapping):
        return categories
    return {category.id: category for category in categories}


def resolve_category(
    transaction: Transaction, categories: CategoryLookup
) -> Optional[Category]:
    """Return the transaction's category, or None if unset or stale."""
    if transaction.category_id is None:
        return None
    return index_categories(categories).get(transaction.category_id)


def classify(transaction: Transaction, categories: CategoryLookup) -> Classification:
    """Resolve a transaction's level, sublevel and color.

    A missing or dangling category reference classifies as ``empresa``
    with no sublevel, so orphaned transactions show up in the company view.
    """
    category = resolve_category(transaction, categories)
    if category is None:
        return Classification(level=CategoryLevel.EMPRESA)

    if category.level == CategoryLevel.EMPRESA:
        return Classification(level=CategoryLevel.EMPRESA, color=category.color)

    color = category.color
    if color is None and category.sublevel is not None:
        color = SUBLEVEL_COLORS.get(category.sublevel)
    return Classification(
        level=category.level, sublevel=category.sublevel, color=color
    )


def effective_origin(transaction: Transaction, categories: CategoryLookup) -> Origin:
    """Origin derived from the category level, else the stored origin."""
    category = resolve_category(transaction, categories)
    if category is None:
        return transaction.origin
    if category.level == CategoryLevel.PERSONAL:
        return Origin.PERSONAL
    return Origin.BUSINESS


def matches_origin(
    transaction: Transaction,
    origin_filter: OriginFilter,
    categories: CategoryLookup,
) -> bool:
    """Check a transaction against an origin filter."""
    if origin_filter == OriginFilter.ALL:
        return True
    return effective_origin(transaction, categories).value == origin_filter.value


def matches_focus(
    transaction: Transaction, focus_mode: FocusMode, categories: CategoryLookup
) -> bool:
    """Check whether a transaction is visible under a focus mode."""
    if focus_mode == FocusMode.ALL:
        return True
    return classify(transaction, categories).level == FOCUS_LEVELS[focus_mode]
