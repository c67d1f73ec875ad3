from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from finance_dashboard.models.investment import InvestmentType

DateType = date


class InvestmentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: InvestmentType
    amount: Decimal = Field(..., gt=0)
    date: DateType
    notes: Optional[str] = None


class InvestmentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[InvestmentType] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    date: Optional[DateType] = None
    notes: Optional[str] = None


class InvestmentResponse(BaseModel):
    id: str
    name: str
    type: InvestmentType
    amount: Decimal
    date: DateType
    notes: Optional[str] = None
    user_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
