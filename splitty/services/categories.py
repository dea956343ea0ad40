"""
In-Memory Category Catalog

Default CategoryLookupInterface implementation.

GUARANTEES:
- Unknown ids resolve to General, never raise
- General always exists and cannot be removed
- Removing a category moves its expenses to General
"""

import re
from typing import Iterable, Optional

from splitty.audit import AuditLogger
from splitty.models.ledger import GENERAL_CATEGORY_ID, Category, Expense
from splitty.services.interface import CategoryLookupInterface, ValidationError


GENERAL_CATEGORY = Category(
    id=GENERAL_CATEGORY_ID,
    label="General",
    color="#6B7280",
    icon="Tag",
)

DEFAULT_CATEGORIES: tuple[Category, ...] = (
    GENERAL_CATEGORY,
    Category(id="food", label="Food & Drink", color="#EF4444", icon="Utensils"),
    Category(id="transport", label="Transport", color="#F59E0B", icon="Bus"),
    Category(id="housing", label="Housing", color="#3B82F6", icon="Home"),
    Category(id="entertainment", label="Entertainment", color="#8B5CF6", icon="Clapperboard"),
    Category(id="shopping", label="Shopping", color="#EC4899", icon="ShoppingCart"),
    Category(id="health", label="Health", color="#10B981", icon="HeartPulse"),
    Category(id="travel", label="Travel", color="#06B6D4", icon="Plane"),
)


def _slugify(label: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", label.strip().lower()).strip("-")
    return slug or "category"


class CategoryCatalog(CategoryLookupInterface):
    """
    Ordered collection of categories owned by the host app.

    Unlike the computation functions this is a stateful service;
    the host keeps one instance per session.
    """

    def __init__(
        self,
        categories: Optional[Iterable[Category]] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._categories: dict[str, Category] = {}
        for category in categories if categories is not None else DEFAULT_CATEGORIES:
            self._categories[category.id] = category
        if GENERAL_CATEGORY_ID not in self._categories:
            self._categories = {GENERAL_CATEGORY_ID: GENERAL_CATEGORY, **self._categories}
        self._audit_logger = audit_logger

    @property
    def categories(self) -> list[Category]:
        return list(self._categories.values())

    def __contains__(self, category_id: str) -> bool:
        return category_id in self._categories

    def get_category_by_id(self, category_id: str) -> Category:
        return self._categories.get(category_id, self._categories[GENERAL_CATEGORY_ID])

    def add_category(self, label: str, color: str, icon: str) -> Category:
        """
        Add a category with an id derived from its label.

        Raises:
            ValidationError: If the label is blank
        """
        if not label or not label.strip():
            raise ValidationError("Please provide a name for the category.")

        base = _slugify(label)
        category_id = base
        suffix = 2
        while category_id in self._categories:
            category_id = f"{base}-{suffix}"
            suffix += 1

        category = Category(id=category_id, label=label, color=color, icon=icon)
        self._categories[category_id] = category
        return category

    def remove_category(
        self,
        category_id: str,
        expenses: Iterable[Expense] = (),
    ) -> list[Expense]:
        """
        Remove a category and reassign its expenses to General.

        Returns:
            The full expense list with reassigned categories

        Raises:
            ValidationError: If asked to remove General
        """
        if category_id == GENERAL_CATEGORY_ID:
            raise ValidationError("The General category cannot be deleted.")

        self._categories.pop(category_id, None)
        return reassign_category(expenses, category_id, audit_logger=self._audit_logger)


def reassign_category(
    expenses: Iterable[Expense],
    removed_id: str,
    target_id: str = GENERAL_CATEGORY_ID,
    audit_logger: Optional[AuditLogger] = None,
) -> list[Expense]:
    """Return expenses with `removed_id` replaced by `target_id`."""
    result = []
    moved = 0
    for expense in expenses:
        if expense.category == removed_id:
            expense = expense.model_copy(update={"category": target_id})
            moved += 1
        result.append(expense)

    if audit_logger and moved:
        audit_logger.log_category_reassigned(
            removed_id=removed_id,
            target_id=target_id,
            expense_count=moved,
        )
    return result
