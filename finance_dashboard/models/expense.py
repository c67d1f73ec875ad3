from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from finance_dashboard.core.database import Base
from finance_dashboard.utils.identifiers import generate_custom_id


class Expense(Base):
    """Standalone expense entry tracked on the calendar view."""
    __tablename__ = "expenses"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("EXP"))
    title = Column(String(100), nullable=False)
    category = Column(String(100), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    date = Column(Date, nullable=False, server_default=func.current_date())
    notes = Column(Text, nullable=True)
    user_id = Column(String(20), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="expenses")
