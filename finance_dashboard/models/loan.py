import enum

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from finance_dashboard.core.database import Base
from finance_dashboard.utils.identifiers import generate_custom_id


class LoanType(str, enum.Enum):
    HOME = "HOME"
    AUTO = "AUTO"
    PERSONAL = "PERSONAL"
    EDUCATION = "EDUCATION"
    OTHER = "OTHER"


class LoanStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    PAID_OFF = "PAID_OFF"
    DEFAULTED = "DEFAULTED"


class Loan(Base):
    __tablename__ = "loans"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("LON"))
    name = Column(String(100), nullable=True)
    lender = Column(String(100), nullable=False)
    type = Column(Enum(LoanType), nullable=False)
    status = Column(Enum(LoanStatus), nullable=False, default=LoanStatus.ACTIVE)

    principal_amount = Column(Numeric(15, 2), nullable=False)
    outstanding_balance = Column(Numeric(15, 2), nullable=False)
    interest_rate = Column(Numeric(5, 2), nullable=False)
    tenure_in_months = Column(Integer, nullable=True)
    emi_amount = Column(Numeric(15, 2), nullable=True)

    issue_date = Column(Date, nullable=True)
    next_payment_date = Column(Date, nullable=True)
    user_id = Column(String(20), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="loans")
    payments = relationship(
        "LoanPayment",
        back_populates="loan",
        cascade="all, delete-orphan",
        order_by="LoanPayment.payment_date.desc()",
    )


class LoanPayment(Base):
    __tablename__ = "loan_payments"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("LPY"))
    loan_id = Column(String(20), ForeignKey("loans.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    payment_date = Column(Date, nullable=False, server_default=func.current_date())

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    loan = relationship("Loan", back_populates="payments")
