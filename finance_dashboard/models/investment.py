import enum

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from finance_dashboard.core.database import Base
from finance_dashboard.utils.identifiers import generate_custom_id


class InvestmentType(str, enum.Enum):
    STOCKS = "STOCKS"
    MUTUAL_FUNDS = "MUTUAL_FUNDS"
    BONDS = "BONDS"
    REAL_ESTATE = "REAL_ESTATE"
    CRYPTO = "CRYPTO"
    OTHER = "OTHER"


class Investment(Base):
    __tablename__ = "investments"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("INV"))
    name = Column(String(100), nullable=False)
    type = Column(Enum(InvestmentType), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    user_id = Column(String(20), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="investments")
