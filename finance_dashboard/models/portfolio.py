from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from finance_dashboard.core.database import Base
from finance_dashboard.utils.identifiers import generate_custom_id


class FixedDeposit(Base):
    __tablename__ = "fixed_deposits"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("FD"))
    bank = Column(String(100), nullable=False)
    principal = Column(Numeric(15, 2), nullable=False)
    rate = Column(Numeric(5, 2), nullable=False)
    maturity_date = Column(Date, nullable=True)
    user_id = Column(String(20), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="fixed_deposits")


class PPF(Base):
    """Public Provident Fund balance snapshot."""
    __tablename__ = "ppfs"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("PPF"))
    balance = Column(Numeric(15, 2), nullable=False)
    as_of = Column(Date, nullable=False)
    user_id = Column(String(20), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="ppfs")


class BondDetail(Base):
    __tablename__ = "bond_details"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("BND"))
    name = Column(String(100), nullable=False)
    units = Column(Numeric(15, 4), nullable=False)
    invested = Column(Numeric(15, 2), nullable=False)
    current_value = Column(Numeric(15, 2), nullable=False)
    maturity_date = Column(Date, nullable=True)
    user_id = Column(String(20), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="bonds")


class RealEstate(Base):
    __tablename__ = "real_estates"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("RE"))
    desc = Column(String(255), nullable=False)
    purchase_price = Column(Numeric(15, 2), nullable=False)
    current_value = Column(Numeric(15, 2), nullable=False)
    user_id = Column(String(20), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="real_estates")


class Gold(Base):
    __tablename__ = "golds"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("GLD"))
    desc = Column(String(255), nullable=False)
    purchase_price = Column(Numeric(15, 2), nullable=False)
    current_value = Column(Numeric(15, 2), nullable=False)
    user_id = Column(String(20), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="golds")
