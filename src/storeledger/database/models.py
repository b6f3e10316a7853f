"""SQLAlchemy models for storeledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Index,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(18, 2, asdecimal=True)


class Account(Base):
    """Chart-of-accounts model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    account_type = Column(String, nullable=False)
    category = Column(String, nullable=False)
    parent_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    level = Column(Integer, default=1, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    parent = relationship("Account", remote_side=[id], backref="children")
    lines = relationship("JournalLine", back_populates="account")


class AccountingPeriod(Base):
    """Accounting period model."""

    __tablename__ = "accounting_periods"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_active = Column(Boolean, default=False, nullable=False)
    is_closed = Column(Boolean, default=False, nullable=False)
    closing_lock = Column(String, nullable=True)
    closed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    entries = relationship("JournalEntry", back_populates="period")
    opening_balances = relationship("OpeningBalance", back_populates="period")


class JournalEntry(Base):
    """Journal entry header model."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    number = Column(String, unique=True, nullable=False)
    entry_date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    reference = Column(String, nullable=True)
    reference_type = Column(String, nullable=True)
    source_id = Column(String, nullable=True)
    period_id = Column(Integer, ForeignKey("accounting_periods.id"), nullable=False)
    is_posted = Column(Boolean, default=False, nullable=False)
    # At most one reversal per entry
    reversal_of_id = Column(Integer, ForeignKey("journal_entries.id"), unique=True, nullable=True)
    user_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (Index("ix_journal_entries_source", "reference_type", "source_id"),)

    # Relationships
    period = relationship("AccountingPeriod", back_populates="entries")
    lines = relationship(
        "JournalLine",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="JournalLine.id",
    )


class JournalLine(Base):
    """Journal detail line model."""

    __tablename__ = "journal_lines"

    id = Column(Integer, primary_key=True)
    entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    debit = Column(MONEY, default=0, nullable=False)
    credit = Column(MONEY, default=0, nullable=False)
    description = Column(String, nullable=True)

    # Relationships
    entry = relationship("JournalEntry", back_populates="lines")
    account = relationship("Account", back_populates="lines")


class OpeningBalance(Base):
    """Opening balance model."""

    __tablename__ = "opening_balances"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    period_id = Column(Integer, ForeignKey("accounting_periods.id"), nullable=False)
    balance = Column(MONEY, nullable=False)

    __table_args__ = (UniqueConstraint("account_id", "period_id", name="uq_opening_account_period"),)

    # Relationships
    period = relationship("AccountingPeriod", back_populates="opening_balances")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
