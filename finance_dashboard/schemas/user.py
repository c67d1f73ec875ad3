from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class UserResponse(BaseModel):
    id: str
    clerk_user_id: str
    email: str
    name: Optional[str] = None
    image_url: Optional[str] = None
    whatsapp_number: Optional[str] = None
    monthly_income: Optional[Decimal] = None
    credit_score: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    monthly_income: Optional[Decimal] = Field(None, ge=0)
    credit_score: Optional[int] = Field(None, ge=300, le=900)
    whatsapp_number: Optional[str] = Field(None, max_length=50)


class UserProfileSummary(BaseModel):
    """Debt analytics shown on the profile page."""
    monthly_income: Decimal
    total_assets: Decimal
    credit_score: Optional[int] = None
    credit_score_missing: bool
    dti_ratio: float
    debt_to_assets_ratio: float
    total_debt: Decimal
    total_monthly_payments: Decimal
