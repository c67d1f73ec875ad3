from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from finance_dashboard.core.dependencies import get_current_user, get_db
from finance_dashboard.logger_config import logger
from finance_dashboard.models.user import User
from finance_dashboard.schemas.common import MessageResponse
from finance_dashboard.schemas.loan import (
    LoanCreate,
    LoanDetailResponse,
    LoanPaymentCreate,
    LoanResponse,
    LoanUpdate,
)
from finance_dashboard.services.loan_service import (
    create_loan,
    delete_loan,
    get_loan,
    get_loans,
    record_payment,
    update_loan,
)

router = APIRouter()


@router.get("", response_model=List[LoanResponse])
def list_loans(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return [LoanResponse.model_validate(loan) for loan in get_loans(db, current_user.id)]
    except Exception as e:
        logger.exception("Error fetching loans")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("", response_model=LoanResponse, status_code=status.HTTP_201_CREATED)
def create_loan_route(
    data: LoanCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a loan from the full form; the first payment is due one month after start_date."""
    try:
        loan = create_loan(
            db,
            user_id=current_user.id,
            name=data.name,
            lender=data.lender,
            loan_type=data.type,
            principal_amount=data.principal_amount,
            outstanding_balance=data.outstanding_balance,
            interest_rate=data.interest_rate,
            tenure_in_months=data.tenure_in_months,
            emi_amount=data.emi_amount,
            start_date=data.start_date,
        )
        logger.info(f"Loan {loan.id} created by {current_user.id}")
        return LoanResponse.model_validate(loan)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.exception("Error creating loan")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/{loan_id}", response_model=LoanDetailResponse)
def get_loan_route(
    loan_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get one loan with its payments, newest first."""
    loan = get_loan(db, current_user.id, loan_id, with_payments=True)
    if not loan:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Loan not found")
    return LoanDetailResponse.model_validate(loan)


@router.patch("/{loan_id}", response_model=LoanResponse)
def update_loan_route(
    loan_id: str,
    data: LoanUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        loan = update_loan(
            db,
            user_id=current_user.id,
            loan_id=loan_id,
            changes=data.model_dump(exclude_unset=True),
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.exception(f"Error updating loan {loan_id}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    if not loan:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Loan not found or access denied")
    logger.info(f"Loan {loan_id} updated by {current_user.id}")
    return LoanResponse.model_validate(loan)


@router.delete("/{loan_id}", response_model=MessageResponse)
def delete_loan_route(
    loan_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        deleted = delete_loan(db, user_id=current_user.id, loan_id=loan_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Loan not found")
    logger.info(f"Loan {loan_id} deleted by {current_user.id}")
    return MessageResponse(message="Loan deleted successfully")


@router.post("/{loan_id}/payments", response_model=LoanDetailResponse, status_code=status.HTTP_201_CREATED)
def record_loan_payment(
    loan_id: str,
    data: LoanPaymentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Record a repayment; the loan is marked PAID_OFF once the balance reaches zero."""
    try:
        loan = record_payment(
            db,
            user_id=current_user.id,
            loan_id=loan_id,
            amount=data.amount,
            payment_date=data.payment_date,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not loan:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Loan not found")
    return LoanDetailResponse.model_validate(loan)
