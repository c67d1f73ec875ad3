from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finance_dashboard.logger_config import logger
from finance_dashboard.models.investment import Investment, InvestmentType


def get_investments(db: Session, user_id: str) -> List[Investment]:
    """All investments of a user, most recent purchase first."""
    return (
        db.query(Investment)
        .filter(Investment.user_id == user_id)
        .order_by(Investment.date.desc())
        .all()
    )


def get_investment(db: Session, user_id: str, investment_id: str) -> Optional[Investment]:
    return (
        db.query(Investment)
        .filter(Investment.id == investment_id, Investment.user_id == user_id)
        .first()
    )


def create_investment(
    db: Session,
    user_id: str,
    name: str,
    investment_type: InvestmentType,
    amount: Decimal,
    investment_date: date,
    notes: Optional[str] = None,
) -> Investment:
    investment = Investment(
        user_id=user_id,
        name=name,
        type=investment_type,
        amount=amount,
        date=investment_date,
        notes=notes,
    )
    db.add(investment)
    try:
        db.commit()
        db.refresh(investment)
        return investment
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error creating investment")
        raise ValueError("Failed to create investment.") from e


def update_investment(db: Session, user_id: str, investment_id: str, changes: dict) -> Optional[Investment]:
    investment = get_investment(db, user_id, investment_id)
    if not investment:
        return None

    for field, value in changes.items():
        setattr(investment, field, value)

    try:
        db.commit()
        db.refresh(investment)
        return investment
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error updating investment {investment_id}")
        raise ValueError("Failed to update investment.") from e


def delete_investment(db: Session, user_id: str, investment_id: str) -> bool:
    investment = get_investment(db, user_id, investment_id)
    if not investment:
        return False

    db.delete(investment)
    try:
        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error deleting investment {investment_id}")
        raise ValueError("Failed to delete investment.") from e
