from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from finance_dashboard.models.account import (
    AccountType,
    RecurringInterval,
    TransactionStatus,
    TransactionType,
)


class AccountCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: AccountType
    balance: Decimal
    is_default: bool = False


class AccountResponse(BaseModel):
    id: str
    name: str
    type: AccountType
    balance: Decimal
    is_default: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TransactionCreate(BaseModel):
    type: TransactionType
    amount: Decimal = Field(..., gt=0)
    category: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    date: Optional[datetime] = None
    account_id: Optional[str] = None
    is_recurring: bool = False
    recurring_interval: Optional[RecurringInterval] = None


class TransactionResponse(BaseModel):
    id: str
    type: TransactionType
    amount: Decimal
    category: str
    description: Optional[str] = None
    date: datetime
    status: TransactionStatus
    is_recurring: bool
    recurring_interval: Optional[RecurringInterval] = None
    account_id: Optional[str] = None

    class Config:
        from_attributes = True


class BudgetUpdate(BaseModel):
    amount: Decimal = Field(..., gt=0)


class BudgetResponse(BaseModel):
    id: str
    amount: Decimal

    class Config:
        from_attributes = True


class CurrentBudgetResponse(BaseModel):
    budget: Optional[BudgetResponse] = None
    current_expenses: Decimal
