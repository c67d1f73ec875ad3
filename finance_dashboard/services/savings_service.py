from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finance_dashboard.logger_config import logger
from finance_dashboard.models.savings import SavingsJar

# Number of deposit/withdrawal entries kept on a jar
DEPOSIT_HISTORY_LIMIT = 20


def get_jars(db: Session, user_id: str) -> List[SavingsJar]:
    """All jars of a user, newest first."""
    return (
        db.query(SavingsJar)
        .filter(SavingsJar.user_id == user_id)
        .order_by(SavingsJar.created_at.desc())
        .all()
    )


def get_jar(db: Session, user_id: str, jar_id: str) -> Optional[SavingsJar]:
    return (
        db.query(SavingsJar)
        .filter(SavingsJar.id == jar_id, SavingsJar.user_id == user_id)
        .first()
    )


def create_jar(
    db: Session,
    user_id: str,
    name: str,
    target_amount: Decimal,
    current_amount: Decimal = Decimal("0"),
    goal_date=None,
    notes: Optional[str] = None,
) -> SavingsJar:
    jar = SavingsJar(
        user_id=user_id,
        name=name,
        target_amount=target_amount,
        current_amount=current_amount,
        goal_date=goal_date,
        notes=notes,
        recent_deposits=[],
    )
    db.add(jar)
    try:
        db.commit()
        db.refresh(jar)
        return jar
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating savings jar: {str(e)}")
        raise


def apply_deposit(jar: SavingsJar, delta: Decimal, now: Optional[datetime] = None) -> None:
    """
    Move money in (positive delta) or out (negative delta) of a jar.

    The balance never drops below zero. The movement is prepended to the
    history, which keeps only the newest DEPOSIT_HISTORY_LIMIT entries.
    """
    now = now or datetime.now(timezone.utc)
    current = Decimal(jar.current_amount or 0)
    jar.current_amount = max(Decimal("0"), current + delta)

    history = jar.recent_deposits if isinstance(jar.recent_deposits, list) else []
    entry = {
        "id": int(now.timestamp() * 1000),
        "amount": float(delta),
        "date": now.isoformat(),
    }
    # Reassign so the JSON column is flagged dirty
    jar.recent_deposits = [entry, *history][:DEPOSIT_HISTORY_LIMIT]


def update_jar(
    db: Session,
    user_id: str,
    jar_id: str,
    name: Optional[str] = None,
    target_amount: Optional[Decimal] = None,
    notes: Optional[str] = None,
    deposit_delta: Optional[Decimal] = None,
) -> Optional[SavingsJar]:
    """Update a jar owned by the user; returns None when it does not exist."""
    jar = get_jar(db, user_id, jar_id)
    if not jar:
        return None

    if name is not None:
        jar.name = name
    if target_amount is not None:
        jar.target_amount = target_amount
    if notes is not None:
        jar.notes = notes
    if deposit_delta is not None:
        apply_deposit(jar, deposit_delta)

    try:
        db.commit()
        db.refresh(jar)
        return jar
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating savings jar {jar_id}: {str(e)}")
        raise


def delete_jar(db: Session, user_id: str, jar_id: str) -> bool:
    jar = get_jar(db, user_id, jar_id)
    if not jar:
        return False

    db.delete(jar)
    try:
        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error deleting savings jar {jar_id}: {str(e)}")
        raise
