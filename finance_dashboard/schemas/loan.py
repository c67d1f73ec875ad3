from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from finance_dashboard.models.loan import LoanStatus, LoanType

DateType = date


class LoanCreate(BaseModel):
    """Full loan form; the first payment falls one month after start_date."""
    name: str = Field(..., min_length=3, description="Loan name must be at least 3 characters long.")
    lender: str = Field(..., min_length=2)
    type: LoanType
    principal_amount: Decimal = Field(..., gt=0)
    outstanding_balance: Decimal = Field(..., gt=0)
    interest_rate: Decimal = Field(..., gt=0, le=100)
    tenure_in_months: int = Field(..., gt=0)
    emi_amount: Decimal = Field(..., gt=0)
    start_date: date


class LoanQuickCreate(BaseModel):
    """Loan overview form; outstanding balance starts at the principal."""
    lender: str = Field(..., min_length=1)
    type: LoanType
    principal_amount: Decimal = Field(..., gt=0)
    interest_rate: Decimal = Field(..., ge=0, le=100)
    emi_amount: Optional[Decimal] = Field(None, gt=0)
    next_payment_date: Optional[date] = None


class LoanUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    lender: Optional[str] = Field(None, min_length=1)
    type: Optional[LoanType] = None
    status: Optional[LoanStatus] = None
    principal_amount: Optional[Decimal] = Field(None, gt=0)
    outstanding_balance: Optional[Decimal] = Field(None, ge=0)
    interest_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    tenure_in_months: Optional[int] = Field(None, gt=0)
    emi_amount: Optional[Decimal] = Field(None, gt=0)
    issue_date: Optional[date] = None
    next_payment_date: Optional[date] = None


class LoanPaymentCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    payment_date: Optional[date] = None


class LoanPaymentResponse(BaseModel):
    id: str
    loan_id: str
    amount: Decimal
    payment_date: date

    class Config:
        from_attributes = True


class LoanResponse(BaseModel):
    id: str
    name: Optional[str] = None
    lender: str
    type: LoanType
    status: LoanStatus
    principal_amount: Decimal
    outstanding_balance: Decimal
    interest_rate: Decimal
    tenure_in_months: Optional[int] = None
    emi_amount: Optional[Decimal] = None
    issue_date: Optional[date] = None
    next_payment_date: Optional[date] = None
    user_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoanDetailResponse(LoanResponse):
    payments: List[LoanPaymentResponse] = []


class NextPayment(BaseModel):
    amount: Optional[Decimal] = None
    date: DateType


class LoanOverviewSummary(BaseModel):
    total_outstanding: Decimal
    total_principal: Decimal
    total_paid: Decimal
    active_loan_count: int
    average_interest_rate: Decimal
    next_payment: Optional[NextPayment] = None


class LoanOverviewResponse(BaseModel):
    summary: LoanOverviewSummary
    loans: List[LoanResponse]


class DebtOverviewLoan(BaseModel):
    id: str
    type: LoanType
    lender: str
    outstanding: Decimal
    total_amount: Decimal
    monthly_payment: Decimal
    interest_rate: Decimal
    payoff_year: int


class DebtHistoryPoint(BaseModel):
    year: int
    balance: Decimal


class DebtOverviewResponse(BaseModel):
    monthly_income: Decimal
    total_assets: Decimal
    credit_score: int
    active_loans: List[DebtOverviewLoan]
    debt_history: List[DebtHistoryPoint]
