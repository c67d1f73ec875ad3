from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Literal, Optional


class DebtInsight(BaseModel):
    title: str
    insight: str


class RepaymentRequest(BaseModel):
    outstanding: Optional[Decimal] = None
    interest_rate: Optional[Decimal] = None
    emi: Optional[Decimal] = None


class RepaymentSuggestion(BaseModel):
    suggested_extra_payment: Decimal
    reasoning: str


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str = Field(..., min_length=1)


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(..., min_length=1)


class ChatResponse(BaseModel):
    reply: str


class BudgetBreakdown(BaseModel):
    fixed_costs: Decimal
    savings: Decimal
    discretionary: Decimal


class BudgetRecommendation(BaseModel):
    suggested_amount: Decimal
    explanation: str
    breakdown: BudgetBreakdown


InsightType = Literal[
    "spending_analysis",
    "budget_prediction",
    "anomaly_detection",
    "future_expenditure",
    "spending_leakage",
    "savings_rate",
    "investment_health",
    "debt_optimization",
    "subscription_audit",
]


class AIInsightRequest(BaseModel):
    insight_type: InsightType = "spending_analysis"


class AIInsightResponse(BaseModel):
    insight_type: InsightType
    status: Literal["critical", "warning", "healthy"]
    headline: str
    detail: str
