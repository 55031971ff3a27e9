"""SQLAlchemy models for the finata document store.

Each collection is a table keyed by ``(user_id, id)`` so that every user
gets an isolated namespace of documents.
"""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    String,
    DateTime,
    Numeric,
    Boolean,
    Index,
    create_engine,
    event,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from finata.database.base import Collection

Base = declarative_base()

# Enough scale for gram/crypto balances as well as currency amounts.
AMOUNT = Numeric(20, 8)


class WalletRecord(Base):
    """Wallet document."""

    __tablename__ = "wallets"

    user_id = Column(String, primary_key=True)
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    currency = Column(String, nullable=False)
    balance = Column(AMOUNT, nullable=False, default=0)
    initial_balance = Column(AMOUNT, nullable=False, default=0)
    color = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class TransactionRecord(Base):
    """Transaction document (income, expense or transfer)."""

    __tablename__ = "transactions"

    user_id = Column(String, primary_key=True)
    id = Column(String, primary_key=True)
    type = Column(String, nullable=False)
    amount = Column(AMOUNT, nullable=False)
    date = Column(DateTime, nullable=True)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=True)

    # Income / expense
    wallet_id = Column(String, nullable=True)
    wallet_name = Column(String, nullable=True)
    currency = Column(String, nullable=True)
    category_id = Column(String, nullable=True)
    category_name = Column(String, nullable=True)

    # Transfer
    source_wallet_id = Column(String, nullable=True)
    source_wallet_name = Column(String, nullable=True)
    source_currency = Column(String, nullable=True)
    target_wallet_id = Column(String, nullable=True)
    target_wallet_name = Column(String, nullable=True)
    target_currency = Column(String, nullable=True)

    __table_args__ = (
        Index("ix_transactions_user_wallet", "user_id", "wallet_id"),
        Index("ix_transactions_user_date", "user_id", "date"),
    )


class CategoryRecord(Base):
    """User-defined category document. Default categories are never stored."""

    __tablename__ = "categories"

    user_id = Column(String, primary_key=True)
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


RECORD_TYPES: dict[Collection, type] = {
    Collection.WALLETS: WalletRecord,
    Collection.TRANSACTIONS: TransactionRecord,
    Collection.CATEGORIES: CategoryRecord,
}


def _take_write_lock_on_begin(engine) -> None:
    """Make every SQLite transaction start with BEGIN IMMEDIATE.

    pysqlite defers BEGIN until the first write, which would let a
    read-modify-write interleave with another writer. Taking the lock up
    front serializes them; a busy database surfaces as OperationalError.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(connection):
        connection.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(database_url: str, busy_timeout: float = 5.0) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["timeout"] = busy_timeout
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    if engine.dialect.name == "sqlite":
        _take_write_lock_on_begin(engine)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
