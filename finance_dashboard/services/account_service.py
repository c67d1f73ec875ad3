from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finance_dashboard.logger_config import logger
from finance_dashboard.models.account import (
    Account,
    AccountType,
    Budget,
    RecurringInterval,
    Transaction,
    TransactionStatus,
    TransactionType,
)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

def get_accounts(db: Session, user_id: str) -> List[Account]:
    return (
        db.query(Account)
        .filter(Account.user_id == user_id)
        .order_by(Account.created_at.asc())
        .all()
    )


def get_account(db: Session, user_id: str, account_id: str) -> Optional[Account]:
    return (
        db.query(Account)
        .filter(Account.id == account_id, Account.user_id == user_id)
        .first()
    )


def create_account(
    db: Session,
    user_id: str,
    name: str,
    account_type: AccountType,
    balance: Decimal,
    is_default: bool = False,
) -> Account:
    """Create an account. The first account, or one flagged default, becomes the only default."""
    has_accounts = db.query(Account.id).filter(Account.user_id == user_id).first() is not None
    make_default = is_default or not has_accounts

    if make_default:
        db.query(Account).filter(
            Account.user_id == user_id, Account.is_default.is_(True)
        ).update({Account.is_default: False}, synchronize_session=False)

    account = Account(
        user_id=user_id,
        name=name,
        type=account_type,
        balance=balance,
        is_default=make_default,
    )
    db.add(account)
    try:
        db.commit()
        db.refresh(account)
        return account
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error creating account")
        raise ValueError("Failed to create account.") from e


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

def get_transactions(
    db: Session,
    user_id: str,
    txn_type: Optional[TransactionType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: Optional[int] = None,
) -> List[Transaction]:
    """Transactions of a user, newest first, optionally filtered by type and date range."""
    query = db.query(Transaction).filter(Transaction.user_id == user_id)
    if txn_type is not None:
        query = query.filter(Transaction.type == txn_type)
    if start_date is not None:
        query = query.filter(Transaction.date >= datetime.combine(start_date, time.min))
    if end_date is not None:
        query = query.filter(Transaction.date <= datetime.combine(end_date, time.max))

    query = query.order_by(Transaction.date.desc())
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def create_transaction(
    db: Session,
    user_id: str,
    txn_type: TransactionType,
    amount: Decimal,
    category: str,
    description: Optional[str] = None,
    txn_date: Optional[datetime] = None,
    account_id: Optional[str] = None,
    is_recurring: bool = False,
    recurring_interval: Optional[RecurringInterval] = None,
) -> Transaction:
    """
    Record a transaction. When an account is given its balance moves with
    the transaction (credited for income, debited for expenses).
    """
    account = None
    if account_id is not None:
        account = get_account(db, user_id, account_id)
        if not account:
            raise ValueError("Account not found.")
    if is_recurring and recurring_interval is None:
        raise ValueError("Recurring transactions need a recurring interval.")

    transaction = Transaction(
        user_id=user_id,
        type=txn_type,
        amount=amount,
        category=category,
        description=description,
        date=txn_date or datetime.now(timezone.utc),
        status=TransactionStatus.COMPLETED,
        is_recurring=is_recurring,
        recurring_interval=recurring_interval if is_recurring else None,
        account_id=account.id if account else None,
    )
    db.add(transaction)

    if account is not None:
        change = amount if txn_type == TransactionType.INCOME else -amount
        account.balance = Decimal(account.balance) + change

    try:
        db.commit()
        db.refresh(transaction)
        return transaction
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error creating transaction")
        raise ValueError("Failed to create transaction.") from e


# ---------------------------------------------------------------------------
# Budget
# ---------------------------------------------------------------------------

def _month_bounds(today: date) -> Tuple[datetime, datetime]:
    start = datetime.combine(today.replace(day=1), time.min)
    if today.month == 12:
        next_month = date(today.year + 1, 1, 1)
    else:
        next_month = date(today.year, today.month + 1, 1)
    return start, datetime.combine(next_month, time.min)


def get_current_budget(
    db: Session,
    user_id: str,
    account_id: Optional[str] = None,
    today: Optional[date] = None,
) -> Tuple[Optional[Budget], Decimal]:
    """Return (budget, expenses this calendar month), optionally for one account."""
    budget = db.query(Budget).filter(Budget.user_id == user_id).first()

    start, end = _month_bounds(today or date.today())
    query = db.query(func.coalesce(func.sum(Transaction.amount), 0)).filter(
        Transaction.user_id == user_id,
        Transaction.type == TransactionType.EXPENSE,
        Transaction.date >= start,
        Transaction.date < end,
    )
    if account_id:
        query = query.filter(Transaction.account_id == account_id)

    total = query.scalar()
    return budget, Decimal(str(total or 0))


def upsert_budget(db: Session, user_id: str, amount: Decimal) -> Budget:
    budget = db.query(Budget).filter(Budget.user_id == user_id).first()
    if budget:
        budget.amount = amount
    else:
        budget = Budget(user_id=user_id, amount=amount)
        db.add(budget)

    try:
        db.commit()
        db.refresh(budget)
        return budget
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error updating budget")
        raise ValueError("Failed to update budget.") from e
