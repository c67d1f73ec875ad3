from fastapi import APIRouter, Depends, HTTPException, Path, Response, status
from sqlalchemy.orm import Session

from finance_dashboard.core.dependencies import get_current_user, get_db
from finance_dashboard.logger_config import logger
from finance_dashboard.models.user import User
from finance_dashboard.schemas.portfolio import (
    BondCreate,
    BondResponse,
    FixedDepositCreate,
    FixedDepositResponse,
    HoldingCreate,
    HoldingResponse,
    PortfolioAssetsResponse,
    PPFCreate,
    PPFResponse,
)
from finance_dashboard.services.portfolio_service import (
    ASSET_MODELS,
    create_asset,
    delete_asset,
    get_portfolio_assets,
)

router = APIRouter()

ASSET_KIND_PATTERN = "^(" + "|".join(ASSET_MODELS) + ")$"


def _create(db: Session, user: User, kind: str, data, response_schema):
    try:
        asset = create_asset(db, user.id, kind, data.model_dump())
        logger.info(f"Portfolio asset {asset.id} ({kind}) created by {user.id}")
        return response_schema.model_validate(asset)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("", response_model=PortfolioAssetsResponse)
def list_portfolio_assets(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Fixed deposits, PPF, bonds, real estate and gold held by the caller."""
    try:
        return PortfolioAssetsResponse.model_validate(get_portfolio_assets(db, current_user.id), from_attributes=True)
    except Exception as e:
        logger.exception("Error fetching portfolio assets")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("/fds", response_model=FixedDepositResponse, status_code=status.HTTP_201_CREATED)
def create_fixed_deposit(data: FixedDepositCreate, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _create(db, current_user, "fds", data, FixedDepositResponse)


@router.post("/ppfs", response_model=PPFResponse, status_code=status.HTTP_201_CREATED)
def create_ppf(data: PPFCreate, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _create(db, current_user, "ppfs", data, PPFResponse)


@router.post("/bonds", response_model=BondResponse, status_code=status.HTTP_201_CREATED)
def create_bond(data: BondCreate, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _create(db, current_user, "bonds", data, BondResponse)


@router.post("/real-estates", response_model=HoldingResponse, status_code=status.HTTP_201_CREATED)
def create_real_estate(data: HoldingCreate, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _create(db, current_user, "real-estates", data, HoldingResponse)


@router.post("/golds", response_model=HoldingResponse, status_code=status.HTTP_201_CREATED)
def create_gold(data: HoldingCreate, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _create(db, current_user, "golds", data, HoldingResponse)


@router.delete("/{kind}/{asset_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_portfolio_asset(
    asset_id: str,
    kind: str = Path(..., pattern=ASSET_KIND_PATTERN),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        deleted = delete_asset(db, current_user.id, kind, asset_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
