from sqlalchemy import Column, DateTime, Integer, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from finance_dashboard.core.database import Base
from finance_dashboard.utils.identifiers import generate_custom_id


class User(Base):
    """A dashboard user, linked to the identity provider through clerk_user_id."""
    __tablename__ = "users"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("USR"))
    clerk_user_id = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(255), nullable=True)
    image_url = Column(String(500), nullable=True)
    whatsapp_number = Column(String(50), nullable=True, index=True)

    # Figures used by the debt analytics when set by the user
    monthly_income = Column(Numeric(15, 2), nullable=True)
    total_assets = Column(Numeric(15, 2), nullable=True)
    credit_score = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    accounts = relationship("Account", back_populates="user", cascade="all, delete-orphan")
    transactions = relationship("Transaction", back_populates="user", cascade="all, delete-orphan")
    budget = relationship("Budget", back_populates="user", uselist=False, cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="user", cascade="all, delete-orphan")
    loans = relationship("Loan", back_populates="user", cascade="all, delete-orphan")
    savings_jars = relationship("SavingsJar", back_populates="user", cascade="all, delete-orphan")
    investments = relationship("Investment", back_populates="user", cascade="all, delete-orphan")
    fixed_deposits = relationship("FixedDeposit", back_populates="user", cascade="all, delete-orphan")
    ppfs = relationship("PPF", back_populates="user", cascade="all, delete-orphan")
    bonds = relationship("BondDetail", back_populates="user", cascade="all, delete-orphan")
    real_estates = relationship("RealEstate", back_populates="user", cascade="all, delete-orphan")
    golds = relationship("Gold", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id='{self.id}', email='{self.email}')>"
