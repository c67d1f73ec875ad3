from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finance_dashboard.logger_config import logger
from finance_dashboard.models.expense import Expense


def _today() -> date:
    return date.today()


def get_expenses(db: Session, user_id: str) -> List[Expense]:
    """All expenses of a user, oldest first."""
    return (
        db.query(Expense)
        .filter(Expense.user_id == user_id)
        .order_by(Expense.date.asc(), Expense.created_at.asc())
        .all()
    )


def get_expense(db: Session, user_id: str, expense_id: str) -> Optional[Expense]:
    return (
        db.query(Expense)
        .filter(Expense.id == expense_id, Expense.user_id == user_id)
        .first()
    )


def create_expense(
    db: Session,
    user_id: str,
    title: str,
    category: str,
    amount: Decimal,
    expense_date: Optional[date] = None,
    notes: Optional[str] = None,
) -> Expense:
    """Create an expense; date defaults to today."""
    expense = Expense(
        user_id=user_id,
        title=title,
        category=category,
        amount=amount,
        date=expense_date or _today(),
        notes=notes,
    )
    db.add(expense)
    try:
        db.commit()
        db.refresh(expense)
        return expense
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error creating expense")
        raise ValueError("Failed to create expense.") from e


def update_expense(db: Session, user_id: str, expense_id: str, changes: dict) -> Optional[Expense]:
    """Apply the provided fields to an expense; returns None when it does not exist."""
    expense = get_expense(db, user_id, expense_id)
    if not expense:
        return None

    for field, value in changes.items():
        setattr(expense, field, value)

    try:
        db.commit()
        db.refresh(expense)
        return expense
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error updating expense {expense_id}")
        raise ValueError("Failed to update expense.") from e


def delete_expense(db: Session, user_id: str, expense_id: str) -> bool:
    expense = get_expense(db, user_id, expense_id)
    if not expense:
        return False

    db.delete(expense)
    try:
        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error deleting expense {expense_id}")
        raise ValueError("Failed to delete expense.") from e
