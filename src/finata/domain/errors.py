"""Shared domain error messages and error types."""


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
    """Domain conflict, such as uniqueness violations or protected records."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


def wallet_not_found(wallet_id: str) -> str:
    """Return message for missing wallet."""
    return f"Wallet {wallet_id} not found"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def category_not_found(category_id: str) -> str:
    """Return message for missing category."""
    return f"Category {category_id} not found"


def category_type_mismatch(category_name: str, category_type: str, entry_type: str) -> str:
    """Return message when an entry points at a category of the other type."""
    return (
        f"Category '{category_name}' is an {category_type} category "
        f"and cannot be used for an {entry_type}"
    )


def invalid_amount(amount) -> str:
    """Return message for a non-positive or unparseable amount."""
    return f"Amount must be a positive number, got '{amount}'"


def same_transfer_wallets() -> str:
    """Return message for a transfer whose endpoints are identical."""
    return "Source and target wallet must be different"


def duplicate_wallet_name(name: str) -> str:
    """Return message for duplicate wallet name."""
    return f"Wallet with name '{name}' already exists"


def wallet_delete_blocked(wallet_id: str, transaction_count: int) -> str:
    """Return message when a wallet still has transactions referencing it."""
    return (
        f"Cannot delete wallet {wallet_id}: it has {transaction_count} "
        f"transaction{'s' if transaction_count != 1 else ''}. "
        "Delete them first or use --force to leave them orphaned."
    )


def default_category_locked(category_name: str) -> str:
    """Return message when a seed category would be edited or deleted."""
    return f"Category '{category_name}' is a default category and cannot be changed"
