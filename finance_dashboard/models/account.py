import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from finance_dashboard.core.database import Base
from finance_dashboard.utils.identifiers import generate_custom_id


class AccountType(str, enum.Enum):
    CURRENT = "CURRENT"
    SAVINGS = "SAVINGS"


class TransactionType(str, enum.Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class TransactionStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class RecurringInterval(str, enum.Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class Account(Base):
    """Bank account; the balance feeds total-asset figures."""
    __tablename__ = "accounts"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("ACC"))
    name = Column(String(100), nullable=False)
    type = Column(Enum(AccountType), nullable=False, default=AccountType.SAVINGS)
    balance = Column(Numeric(15, 2), nullable=False, default=0)
    is_default = Column(Boolean, nullable=False, default=False)
    user_id = Column(String(20), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="accounts")
    transactions = relationship("Transaction", back_populates="account")


class Transaction(Base):
    """Income or expense movement, from the dashboard or a messaging webhook."""
    __tablename__ = "transactions"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("TXN"))
    type = Column(Enum(TransactionType), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    status = Column(Enum(TransactionStatus), nullable=False, default=TransactionStatus.COMPLETED)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_interval = Column(Enum(RecurringInterval), nullable=True)
    account_id = Column(String(20), ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)
    user_id = Column(String(20), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="transactions")
    account = relationship("Account", back_populates="transactions")


class Budget(Base):
    """Monthly spending budget, one per user."""
    __tablename__ = "budgets"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("BDG"))
    amount = Column(Numeric(15, 2), nullable=False)
    user_id = Column(String(20), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="budget")
