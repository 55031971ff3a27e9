"""Shared pytest fixtures for finata tests."""

import os
import tempfile
from decimal import Decimal

import pytest

from finata.database.factories import create_memory_store, create_sqlite_store
from finata.domain.category import CategoryService
from finata.domain.ledger import LedgerEngine
from finata.domain.transaction import TransactionService
from finata.domain.wallet import WalletService


@pytest.fixture
def temp_db():
    """Create a temporary SQLite-backed store for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path, user_id="tester")
    # Store the path for tests that need it
    store.database_path = db_path
    store.connect()
    store.initialize_schema()

    yield store

    store.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_store():
    """Create an in-memory store for testing."""
    return create_memory_store(user_id="tester")


@pytest.fixture(params=["sqlite", "memory"])
def store(request):
    """Run the test once against each store implementation."""
    if request.param == "sqlite":
        return request.getfixturevalue("temp_db")
    return request.getfixturevalue("memory_store")


@pytest.fixture
def wallet_service(store):
    """Create a WalletService on the parametrized store."""
    return WalletService(store)


@pytest.fixture
def category_service(store):
    """Create a CategoryService on the parametrized store."""
    return CategoryService(store)


@pytest.fixture
def transaction_service(store):
    """Create a TransactionService on the parametrized store."""
    return TransactionService(store)


@pytest.fixture
def ledger(store):
    """Create a LedgerEngine on the parametrized store."""
    return LedgerEngine(store)


@pytest.fixture
def cash_wallet(wallet_service):
    """A TRY cash wallet holding 500."""
    wallet_id = wallet_service.create_wallet("Cüzdan", "Nakit", initial_balance=Decimal("500"))
    return wallet_service.require_wallet(wallet_id)


@pytest.fixture
def bank_wallet(wallet_service):
    """A TRY bank wallet holding 100."""
    wallet_id = wallet_service.create_wallet(
        "Ziraat", "Banka Hesabı", initial_balance=Decimal("100")
    )
    return wallet_service.require_wallet(wallet_id)


@pytest.fixture
def dollar_wallet(wallet_service):
    """A USD wallet holding 10."""
    wallet_id = wallet_service.create_wallet("Dolar", "Dolar", initial_balance=Decimal("10"))
    return wallet_service.require_wallet(wallet_id)


@pytest.fixture
def balance_of(wallet_service):
    """Return a helper reading a wallet's stored balance."""

    def read(wallet_id):
        return wallet_service.require_wallet(wallet_id).balance

    return read


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def rates_path(tmp_path):
    """Path for a rate table that does not exist yet."""
    return str(tmp_path / "rates.json")


@pytest.fixture
def invoke(cli_runner, temp_db, rates_path):
    """Invoke the CLI against the temporary database and rate table."""
    from finata.cli.main import cli

    def run(*args, input=None):
        return cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "--user",
                temp_db.user_id,
                "--rates-path",
                rates_path,
                *args,
            ],
            input=input,
        )

    return run
