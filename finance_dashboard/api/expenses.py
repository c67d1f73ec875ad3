from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from finance_dashboard.core.dependencies import get_current_user, get_db
from finance_dashboard.logger_config import logger
from finance_dashboard.models.user import User
from finance_dashboard.schemas.common import MessageResponse
from finance_dashboard.schemas.expense import ExpenseCreate, ExpenseResponse, ExpenseUpdate
from finance_dashboard.services.expense_service import (
    create_expense,
    delete_expense,
    get_expenses,
    update_expense,
)

router = APIRouter()


@router.get("", response_model=List[ExpenseResponse])
def list_expenses(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the caller's expenses in date order."""
    try:
        return [ExpenseResponse.model_validate(e) for e in get_expenses(db, current_user.id)]
    except Exception as e:
        logger.exception("Error fetching expenses")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
def create_expense_route(
    data: ExpenseCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create an expense; date defaults to today if not provided."""
    try:
        expense = create_expense(
            db,
            user_id=current_user.id,
            title=data.title,
            category=data.category,
            amount=data.amount,
            expense_date=data.date,
            notes=data.notes,
        )
        return ExpenseResponse.model_validate(expense)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.exception("Error creating expense")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.put("/{expense_id}", response_model=ExpenseResponse)
def update_expense_route(
    expense_id: str,
    data: ExpenseUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        expense = update_expense(
            db,
            user_id=current_user.id,
            expense_id=expense_id,
            changes=data.model_dump(exclude_unset=True),
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.exception(f"Error updating expense {expense_id}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    if not expense:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
    return ExpenseResponse.model_validate(expense)


@router.delete("/{expense_id}", response_model=MessageResponse)
def delete_expense_route(
    expense_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        deleted = delete_expense(db, user_id=current_user.id, expense_id=expense_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.exception(f"Error deleting expense {expense_id}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
    return MessageResponse(message="Deleted")
