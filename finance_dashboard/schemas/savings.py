from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime


class DepositEntry(BaseModel):
    id: int
    amount: float
    date: str


class SavingsJarCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    target_amount: Decimal = Field(..., gt=0)
    current_amount: Decimal = Field(Decimal("0"), ge=0)
    goal_date: Optional[date] = None
    notes: Optional[str] = None


class SavingsJarUpdate(BaseModel):
    """Partial update; deposit_delta is positive for deposits, negative for withdrawals."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    target_amount: Optional[Decimal] = Field(None, gt=0)
    notes: Optional[str] = None
    deposit_delta: Optional[Decimal] = None


class SavingsJarResponse(BaseModel):
    id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal
    goal_date: Optional[date] = None
    notes: Optional[str] = None
    recent_deposits: List[DepositEntry] = []
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
