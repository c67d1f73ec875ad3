from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date


class FixedDepositCreate(BaseModel):
    bank: str = Field(..., min_length=1, max_length=100)
    principal: Decimal = Field(..., gt=0)
    rate: Decimal = Field(..., ge=0, le=100)
    maturity_date: Optional[date] = None


class FixedDepositResponse(FixedDepositCreate):
    id: str

    class Config:
        from_attributes = True


class PPFCreate(BaseModel):
    balance: Decimal = Field(..., ge=0)
    as_of: date


class PPFResponse(PPFCreate):
    id: str

    class Config:
        from_attributes = True


class BondCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    units: Decimal = Field(..., gt=0)
    invested: Decimal = Field(..., ge=0)
    current_value: Decimal = Field(..., ge=0)
    maturity_date: Optional[date] = None


class BondResponse(BondCreate):
    id: str

    class Config:
        from_attributes = True


class HoldingCreate(BaseModel):
    """Real estate and gold share the same shape."""
    desc: str = Field(..., min_length=1, max_length=255)
    purchase_price: Decimal = Field(..., ge=0)
    current_value: Decimal = Field(..., ge=0)


class HoldingResponse(HoldingCreate):
    id: str

    class Config:
        from_attributes = True


class PortfolioAssetsResponse(BaseModel):
    fds: List[FixedDepositResponse]
    ppfs: List[PPFResponse]
    bonds: List[BondResponse]
    real_estates: List[HoldingResponse]
    golds: List[HoldingResponse]
