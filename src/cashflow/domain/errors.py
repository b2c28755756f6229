"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def category_name_not_found(name: str, category_type: str) -> str:
    """Return message for missing category by name."""
    return f"{category_type.capitalize()} category '{name}' not found"


def duplicate_category_name(name: str, category_type: str) -> str:
    """Return message for a category name already taken for a type."""
    return f"{category_type.capitalize()} category '{name}' already exists"


def non_positive_amount(amount: Decimal) -> str:
    """Return message for amounts that violate the positive-magnitude rule."""
    return f"Amount must be greater than zero (got {amount})"


def invalid_installment_count(count: int) -> str:
    """Return message for an installment plan with fewer than two payments."""
    return f"Installment plans need at least 2 installments (got {count})"
