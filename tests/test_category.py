"""Tests for CategoryService."""

import pytest

from finata.database.base import Collection
from finata.domain.category import DEFAULT_CATEGORIES
from finata.domain.entities import CategoryType
from finata.domain.errors import ConflictError, NotFoundError, ValidationError


def test_defaults_listed_but_not_stored(category_service, store):
    """The seed set is returned without being written to the store."""
    categories = category_service.list_categories()
    assert categories == list(DEFAULT_CATEGORIES)
    assert store.list(Collection.CATEGORIES) == []


def test_defaults_by_type(category_service):
    income = category_service.list_categories(CategoryType.INCOME)
    expense = category_service.list_categories(CategoryType.EXPENSE)
    assert len(income) == 5
    assert len(expense) == 7
    assert all(c.type == CategoryType.INCOME for c in income)


def test_create_category_is_merged(category_service):
    """User categories follow the defaults of their type."""
    category_id = category_service.create_category("Kırtasiye", CategoryType.EXPENSE)

    expense = category_service.list_categories(CategoryType.EXPENSE)
    assert expense[-1].id == category_id
    assert expense[-1].name == "Kırtasiye"
    assert not expense[-1].is_default
    assert category_id not in [c.id for c in category_service.list_categories(CategoryType.INCOME)]


def test_create_category_validation(category_service):
    with pytest.raises(ValidationError):
        category_service.create_category("   ", CategoryType.INCOME)
    with pytest.raises(ValueError):
        category_service.create_category("X", "gift")


def test_create_category_duplicate_name_per_type(category_service):
    """Names are unique within a type, case-insensitively."""
    with pytest.raises(ConflictError):
        category_service.create_category("fatura", CategoryType.EXPENSE)
    # The same name is allowed for the other type
    category_service.create_category("Fatura", CategoryType.INCOME)


def test_rename_and_delete_user_category(category_service):
    category_id = category_service.create_category("Prim", CategoryType.INCOME)
    category_service.rename_category(category_id, "İkramiye")
    assert category_service.require_category(category_id).name == "İkramiye"

    category_service.delete_category(category_id)
    assert category_service.get_category(category_id) is None


def test_default_category_is_locked(category_service):
    with pytest.raises(ConflictError, match="default category"):
        category_service.rename_category("default-bill", "Faturalar")
    with pytest.raises(ConflictError):
        category_service.delete_category("default-salary")


def test_missing_category(category_service):
    with pytest.raises(NotFoundError):
        category_service.require_category("missing")
    with pytest.raises(NotFoundError):
        category_service.delete_category("missing")


def test_deleted_category_keeps_transaction_snapshot(
    category_service, transaction_service, cash_wallet
):
    """Transactions keep the category name they were saved with."""
    category_id = category_service.create_category("Hobi", CategoryType.EXPENSE)
    txn = transaction_service.create_entry("expense", "30", cash_wallet.id, category_id)
    category_service.delete_category(category_id)

    assert transaction_service.require_transaction(txn.id).category_name == "Hobi"
