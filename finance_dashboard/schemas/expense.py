from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime

# Alias to avoid field name 'date' shadowing type 'date' in annotations (Pydantic v2)
DateType = date


class ExpenseCreate(BaseModel):
    """Expense create - date defaults to today on server if not provided."""
    title: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(..., gt=0)
    date: Optional[DateType] = None
    notes: Optional[str] = None


class ExpenseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    amount: Optional[Decimal] = Field(None, gt=0)
    date: Optional[DateType] = None
    notes: Optional[str] = None


class ExpenseResponse(BaseModel):
    id: str
    title: str
    category: str
    amount: Decimal
    date: DateType
    notes: Optional[str] = None
    user_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
