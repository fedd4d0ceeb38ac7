"""SQLAlchemy models for settleup database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Group(Base):
    """Expense-sharing group model."""

    __tablename__ = "groups"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=True)
    currency = Column(String(10), nullable=False, default="USD")
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    members = relationship("Member", back_populates="group", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="group", cascade="all, delete-orphan")
    settlements = relationship("Settlement", back_populates="group", cascade="all, delete-orphan")


class Member(Base):
    """Group member model."""

    __tablename__ = "members"

    id = Column(Integer, primary_key=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False)
    handle = Column(String, nullable=False)
    display_name = Column(String, nullable=False)
    joined_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("group_id", "handle", name="uq_group_member_handle"),)

    # Relationships
    group = relationship("Group", back_populates="members")


class Expense(Base):
    """Expense model. Splits are written and replaced together with it."""

    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    payer = Column(String, nullable=False)
    currency = Column(String(10), nullable=False)
    split_rule = Column(String, nullable=False)
    category = Column(String, nullable=True)
    expense_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    group = relationship("Group", back_populates="expenses")
    splits = relationship(
        "ExpenseSplit",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="ExpenseSplit.position",
    )


class ExpenseSplit(Base):
    """One participant's owed share of an expense."""

    __tablename__ = "expense_splits"

    id = Column(Integer, primary_key=True)
    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=False)
    participant = Column(String, nullable=False)
    position = Column(Integer, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    weight = Column(Numeric(12, 4), nullable=True)

    __table_args__ = (UniqueConstraint("expense_id", "participant", name="uq_expense_participant"),)

    # Relationships
    expense = relationship("Expense", back_populates="splits")


class Settlement(Base):
    """Recorded repayment model."""

    __tablename__ = "settlements"

    id = Column(Integer, primary_key=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False)
    from_participant = Column(String, nullable=False)
    to_participant = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(10), nullable=False)
    settled_at = Column(Date, nullable=False)
    idempotency_key = Column(String, nullable=True)
    note = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # NULL keys never collide, so only keyed settlements are deduplicated
    __table_args__ = (
        UniqueConstraint("group_id", "idempotency_key", name="uq_group_settlement_key"),
    )

    # Relationships
    group = relationship("Group", back_populates="settlements")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
