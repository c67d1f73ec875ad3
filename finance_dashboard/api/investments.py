from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from finance_dashboard.core.dependencies import get_current_user, get_db
from finance_dashboard.logger_config import logger
from finance_dashboard.models.user import User
from finance_dashboard.schemas.investment import InvestmentCreate, InvestmentResponse, InvestmentUpdate
from finance_dashboard.services.investment_service import (
    create_investment,
    delete_investment,
    get_investments,
    update_investment,
)

router = APIRouter()


@router.get("", response_model=List[InvestmentResponse])
def list_investments(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return [InvestmentResponse.model_validate(i) for i in get_investments(db, current_user.id)]
    except Exception as e:
        logger.exception("Error fetching investments")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("", response_model=InvestmentResponse, status_code=status.HTTP_201_CREATED)
def create_investment_route(
    data: InvestmentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        investment = create_investment(
            db,
            user_id=current_user.id,
            name=data.name,
            investment_type=data.type,
            amount=data.amount,
            investment_date=data.date,
            notes=data.notes,
        )
        logger.info(f"Investment {investment.id} created by {current_user.id}")
        return InvestmentResponse.model_validate(investment)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.exception("Error creating investment")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.patch("/{investment_id}", response_model=InvestmentResponse)
def update_investment_route(
    investment_id: str,
    data: InvestmentUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        investment = update_investment(
            db,
            user_id=current_user.id,
            investment_id=investment_id,
            changes=data.model_dump(exclude_unset=True),
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not investment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Investment not found")
    return InvestmentResponse.model_validate(investment)


@router.delete("/{investment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_investment_route(
    investment_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        deleted = delete_investment(db, user_id=current_user.id, investment_id=investment_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Investment not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
