"""Category domain service."""

import logging
from typing import Optional
from cashflow.database.base import Database
from cashflow.domain.entities import (
    Category,
    CategoryLevel,
    PersonalSublevel,
    TransactionType,
)
from cashflow.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_name_not_found,
    category_not_found,
    duplicate_category_name,
)

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        name: str,
        category_type: TransactionType,
        level: CategoryLevel = CategoryLevel.EMPRESA,
        sublevel: Optional[PersonalSublevel] = None,
        color: Optional[str] = None,
        is_fixed: bool = False,
    ) -> int:
        """Create a category.

        Args:
            name: Category name, unique within its type
            category_type: Income or expense
            level: Company or personal
            sublevel: Personal sub-bucket; ignored for company categories
            color: Optional display color
            is_fixed: Whether the category is a fixed cost/income

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If the name is already used for this type
        """
        name = name.strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        if self.db.get_category_by_name(name, category_type) is not None:
            raise ConflictError(duplicate_category_name(name, category_type.value))

        if level == CategoryLevel.EMPRESA:
            sublevel = None

        return self.db.create_category(
            name=name,
            category_type=category_type,
            level=level,
            sublevel=sublevel,
            color=color,
            is_fixed=is_fixed,
        )

    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID.

        Args:
            category_id: Category ID

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category(category_id)

    def get_category_by_name(
        self, name: str, category_type: TransactionType
    ) -> Optional[Category]:
        """Get category by case-insensitive name within a type."""
        return self.db.get_category_by_name(name, category_type)

    def require_category_by_name(
        self, name: str, category_type: TransactionType
    ) -> Category:
        """Get category by name or raise NotFoundError."""
        category = self.db.get_category_by_name(name, category_type)
        if category is None:
            raise NotFoundError(category_name_not_found(name, category_type.value))
        return category

    def list_categories(
        self, category_type: Optional[TransactionType] = None
    ) -> list[Category]:
        """List categories.

        Args:
            category_type: Optional type to filter by

        Returns:
            List of category entities
        """
        return self.db.list_categories(category_type=category_type)

    def count_transactions(self, category_id: int) -> int:
        """Count transactions assigned to a category."""
        return self.db.count_category_transactions(category_id)

    def update_category(self, category_id: int, **fields) -> None:
        """Update category fields in place.

        Moving a category to the company level clears its sublevel.

        Raises:
            NotFoundError: If the category doesn't exist
            ConflictError: If the new name is already used for the type
        """
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))

        if "name" in fields:
            fields["name"] = fields["name"].strip()
            category_type = fields.get("type", category.type)
            existing = self.db.get_category_by_name(fields["name"], category_type)
            if existing is not None and existing.id != category_id:
                raise ConflictError(
                    duplicate_category_name(fields["name"], category_type.value)
                )

        if fields.get("level", category.level) == CategoryLevel.EMPRESA:
            fields["sublevel"] = None

        self.db.update_category(category_id, **fields)

    def delete_category(self, category_id: int) -> int:
        """Delete a category without deleting its transactions.

        Linked transactions keep existing with their category cleared, so they
        group under their description from then on.

        Returns:
            Number of transactions left uncategorized

        Raises:
            NotFoundError: If the category doesn't exist
        """
        if self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        cleared = self.db.delete_category(category_id)
        logger.info(
            "Deleted category %s; %d transactions are now uncategorized",
            category_id,
            cleared,
        )
        return cleared
