"""Domain layer for finata application."""

# Services import the database layer, which imports domain errors and
# entities, so the services are exported lazily to avoid an import cycle.
_EXPORTS = {
    "LedgerEngine": "finata.domain.ledger",
    "LedgerMirror": "finata.domain.mirror",
    "TransactionService": "finata.domain.transaction",
    "WalletService": "finata.domain.wallet",
    "CategoryService": "finata.domain.category",
}

__all__ = list(_EXPORTS)


def __getattr__(name):
    if name in _EXPORTS:
        from importlib import import_module

        return getattr(import_module(_EXPORTS[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
