from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from finance_dashboard.core.database import Base
from finance_dashboard.utils.identifiers import generate_custom_id


class SavingsJar(Base):
    """Savings goal; recent_deposits keeps the newest movements first."""
    __tablename__ = "savings_jars"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("JAR"))
    name = Column(String(100), nullable=False)
    target_amount = Column(Numeric(15, 2), nullable=False)
    current_amount = Column(Numeric(15, 2), nullable=False, default=0)
    goal_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    recent_deposits = Column(JSON, nullable=False, default=list)
    user_id = Column(String(20), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="savings_jars")
