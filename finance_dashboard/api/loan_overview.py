from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from finance_dashboard.core.dependencies import get_current_user, get_db
from finance_dashboard.logger_config import logger
from finance_dashboard.models.user import User
from finance_dashboard.schemas.loan import (
    DebtOverviewResponse,
    LoanOverviewResponse,
    LoanQuickCreate,
    LoanResponse,
)
from finance_dashboard.services.loan_service import (
    get_debt_overview,
    get_loans,
    get_overview_summary,
    quick_create_loan,
)

router = APIRouter()
debt_router = APIRouter()


@router.get("", response_model=List[LoanResponse])
def list_overview_loans(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return [LoanResponse.model_validate(loan) for loan in get_loans(db, current_user.id)]
    except Exception as e:
        logger.exception("Error fetching loan overview")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("", response_model=LoanResponse, status_code=status.HTTP_201_CREATED)
def quick_create_loan_route(
    data: LoanQuickCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add an ACTIVE loan whose outstanding balance starts at the principal."""
    try:
        loan = quick_create_loan(
            db,
            user_id=current_user.id,
            lender=data.lender,
            loan_type=data.type,
            principal_amount=data.principal_amount,
            interest_rate=data.interest_rate,
            emi_amount=data.emi_amount,
            next_payment_date=data.next_payment_date,
        )
        return LoanResponse.model_validate(loan)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.exception("Error creating loan from overview")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/summary", response_model=LoanOverviewResponse)
def loan_overview_summary(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Totals across loans plus the next upcoming payment."""
    try:
        overview = get_overview_summary(db, current_user.id)
        return LoanOverviewResponse(
            summary=overview["summary"],
            loans=[LoanResponse.model_validate(loan) for loan in overview["loans"]],
        )
    except Exception as e:
        logger.exception("Error building loan overview summary")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@debt_router.get("", response_model=DebtOverviewResponse)
def debt_overview(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return DebtOverviewResponse(**get_debt_overview(db, current_user))
    except Exception as e:
        logger.exception("Error building debt overview")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
