"""Category domain service."""

import uuid
from datetime import datetime
from typing import Optional, Union

from finata.database.base import AtomicHandle, Collection, DocumentStore
from finata.domain.documents import category_from_document
from finata.domain.entities import Category, CategoryType
from finata.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_not_found,
    default_category_locked,
)

# Fixed seed set. These are never stored and never mutated; the read
# accessors union them with the user's own categories.
DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category("default-salary", "Maaş", CategoryType.INCOME, True),
    Category("default-freelance", "Serbest Çalışma", CategoryType.INCOME, True),
    Category("default-rent", "Kira Geliri", CategoryType.INCOME, True),
    Category("default-investment", "Yatırım Getirisi", CategoryType.INCOME, True),
    Category("default-other-income", "Diğer Gelir", CategoryType.INCOME, True),
    Category("default-groceries", "Market Alışverişi", CategoryType.EXPENSE, True),
    Category("default-transport", "Ulaşım", CategoryType.EXPENSE, True),
    Category("default-bill", "Fatura", CategoryType.EXPENSE, True),
    Category("default-entertainment", "Eğlence", CategoryType.EXPENSE, True),
    Category("default-dining", "Yemek/Restoran", CategoryType.EXPENSE, True),
    Category("default-clothing", "Giyim", CategoryType.EXPENSE, True),
    Category("default-other-expense", "Diğer Gider", CategoryType.EXPENSE, True),
)

_DEFAULTS_BY_ID = {category.id: category for category in DEFAULT_CATEGORIES}


def find_category(
    reader: Union[DocumentStore, AtomicHandle], category_id: str
) -> Optional[Category]:
    """Resolve a category id against the seed set, then the stored categories.

    ``reader`` may be a store or an atomic handle, so the lookup can run
    inside a ledger operation.
    """
    if category_id in _DEFAULTS_BY_ID:
        return _DEFAULTS_BY_ID[category_id]
    doc = reader.get(Collection.CATEGORIES, category_id)
    if doc is None:
        return None
    return category_from_document(category_id, doc)


def merge_categories(
    user_categories: list[Category], category_type: Optional[CategoryType] = None
) -> list[Category]:
    """Return the seed set followed by the user's categories, optionally by type."""
    merged = list(DEFAULT_CATEGORIES) + sorted(user_categories, key=lambda c: c.name.lower())
    if category_type is None:
        return merged
    return [category for category in merged if category.type == category_type]


class CategoryService:
    """Service for managing categories."""

    def __init__(self, store: DocumentStore):
        """Initialize category service.

        Args:
            store: Document store instance
        """
        self.store = store

    def list_categories(self, category_type: Optional[CategoryType] = None) -> list[Category]:
        """List default and user categories.

        Args:
            category_type: Optional type to filter by

        Returns:
            Default categories first, then user categories by name
        """
        user_categories = [
            category_from_document(doc_id, doc)
            for doc_id, doc in self.store.list(Collection.CATEGORIES)
        ]
        return merge_categories(user_categories, category_type)

    def get_category(self, category_id: str) -> Optional[Category]:
        """Get a default or user category by ID."""
        return find_category(self.store, category_id)

    def require_category(self, category_id: str) -> Category:
        """Get a category by ID or raise NotFoundError."""
        category = self.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        return category

    def create_category(self, name: str, category_type: CategoryType) -> str:
        """Create a user category.

        Args:
            name: Category name
            category_type: income or expense

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a category of the same type already has this name
        """
        name = self._clean_name(name)
        category_type = CategoryType(category_type)
        self._ensure_unique(name, category_type)

        category_id = uuid.uuid4().hex
        self.store.set(
            Collection.CATEGORIES,
            category_id,
            {
                "name": name,
                "type": category_type.value,
                "is_default": False,
                "created_at": datetime.now(),
            },
        )
        return category_id

    def rename_category(self, category_id: str, name: str) -> None:
        """Rename a user category.

        Transactions keep the category name they were saved with.

        Raises:
            NotFoundError: If the category doesn't exist
            ConflictError: If the category is a default one or the name is taken
        """
        category = self._require_user_category(category_id)
        name = self._clean_name(name)
        self._ensure_unique(name, category.type, exclude_id=category_id)
        self.store.update(Collection.CATEGORIES, category_id, {"name": name})

    def delete_category(self, category_id: str) -> None:
        """Delete a user category.

        Raises:
            NotFoundError: If the category doesn't exist
            ConflictError: If the category is a default one
        """
        self._require_user_category(category_id)
        self.store.delete(Collection.CATEGORIES, category_id)

    def _require_user_category(self, category_id: str) -> Category:
        category = self.require_category(category_id)
        if category.is_default:
            raise ConflictError(default_category_locked(category.name))
        return category

    def _ensure_unique(
        self, name: str, category_type: CategoryType, exclude_id: Optional[str] = None
    ) -> None:
        for existing in self.list_categories(category_type):
            if existing.id != exclude_id and existing.name.lower() == name.lower():
                raise ConflictError(f"Category '{name}' already exists")

    @staticmethod
    def _clean_name(name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        return name
