from datetime import date
from decimal import Decimal
from typing import List, Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from finance_dashboard.logger_config import logger
from finance_dashboard.models.loan import Loan, LoanPayment, LoanStatus, LoanType
from finance_dashboard.models.user import User

ZERO = Decimal("0")


def _commit(db: Session, loan: Loan, action: str) -> Loan:
    try:
        db.commit()
        db.refresh(loan)
        return loan
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error {action} loan")
        raise ValueError(f"Failed {action} loan.") from e


def get_loans(db: Session, user_id: str) -> List[Loan]:
    """All loans of a user, newest first."""
    return (
        db.query(Loan)
        .filter(Loan.user_id == user_id)
        .order_by(Loan.created_at.desc())
        .all()
    )


def get_loan(db: Session, user_id: str, loan_id: str, with_payments: bool = False) -> Optional[Loan]:
    query = db.query(Loan).filter(Loan.id == loan_id, Loan.user_id == user_id)
    if with_payments:
        query = query.options(selectinload(Loan.payments))
    return query.first()


def create_loan(
    db: Session,
    user_id: str,
    name: str,
    lender: str,
    loan_type: LoanType,
    principal_amount: Decimal,
    outstanding_balance: Decimal,
    interest_rate: Decimal,
    tenure_in_months: int,
    emi_amount: Decimal,
    start_date: date,
) -> Loan:
    """Create a loan from the full form; the first payment is due a month after start."""
    loan = Loan(
        user_id=user_id,
        name=name,
        lender=lender,
        type=loan_type,
        status=LoanStatus.ACTIVE,
        principal_amount=principal_amount,
        outstanding_balance=outstanding_balance,
        interest_rate=interest_rate,
        tenure_in_months=tenure_in_months,
        emi_amount=emi_amount,
        issue_date=start_date,
        next_payment_date=start_date + relativedelta(months=1),
    )
    db.add(loan)
    return _commit(db, loan, "creating")


def quick_create_loan(
    db: Session,
    user_id: str,
    lender: str,
    loan_type: LoanType,
    principal_amount: Decimal,
    interest_rate: Decimal,
    emi_amount: Optional[Decimal] = None,
    next_payment_date: Optional[date] = None,
) -> Loan:
    """Create a loan from the overview form; nothing has been repaid yet."""
    loan = Loan(
        user_id=user_id,
        lender=lender,
        type=loan_type,
        status=LoanStatus.ACTIVE,
        principal_amount=principal_amount,
        outstanding_balance=principal_amount,
        interest_rate=interest_rate,
        emi_amount=emi_amount,
        next_payment_date=next_payment_date,
    )
    db.add(loan)
    return _commit(db, loan, "creating")


def update_loan(db: Session, user_id: str, loan_id: str, changes: dict) -> Optional[Loan]:
    loan = get_loan(db, user_id, loan_id)
    if not loan:
        return None

    for field, value in changes.items():
        setattr(loan, field, value)
    return _commit(db, loan, "updating")


def delete_loan(db: Session, user_id: str, loan_id: str) -> bool:
    loan = get_loan(db, user_id, loan_id)
    if not loan:
        return False

    db.delete(loan)
    try:
        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error deleting loan {loan_id}")
        raise ValueError("Failed to delete loan.") from e


def record_payment(
    db: Session,
    user_id: str,
    loan_id: str,
    amount: Decimal,
    payment_date: Optional[date] = None,
) -> Optional[Loan]:
    """
    Record a repayment against a loan.

    The outstanding balance is floored at zero and the loan is marked
    PAID_OFF once nothing remains.
    """
    loan = get_loan(db, user_id, loan_id)
    if not loan:
        return None
    if loan.status == LoanStatus.PAID_OFF:
        raise ValueError("Loan is already paid off.")

    paid_on = payment_date or date.today()
    db.add(LoanPayment(loan_id=loan.id, amount=amount, payment_date=paid_on))

    loan.outstanding_balance = max(ZERO, Decimal(loan.outstanding_balance) - amount)
    if loan.outstanding_balance == ZERO:
        loan.status = LoanStatus.PAID_OFF
        loan.next_payment_date = None
    elif loan.next_payment_date and loan.next_payment_date <= paid_on:
        loan.next_payment_date = loan.next_payment_date + relativedelta(months=1)

    _commit(db, loan, "recording payment for")
    return get_loan(db, user_id, loan_id, with_payments=True)


def get_overview_summary(db: Session, user_id: str) -> dict:
    """
    Totals for the loan overview page.

    Outstanding and average rate cover ACTIVE loans only; principal covers
    every loan, so total paid includes closed loans.
    """
    loans = (
        db.query(Loan)
        .filter(Loan.user_id == user_id)
        .order_by(Loan.issue_date.asc())
        .all()
    )
    active = [loan for loan in loans if loan.status == LoanStatus.ACTIVE]

    total_outstanding = sum((Decimal(l.outstanding_balance) for l in active), ZERO)
    total_principal = sum((Decimal(l.principal_amount) for l in loans), ZERO)
    total_rate = sum((Decimal(l.interest_rate) for l in active), ZERO)
    average_rate = total_rate / len(active) if active else ZERO

    upcoming = sorted(
        (l for l in active if l.next_payment_date),
        key=lambda l: l.next_payment_date,
    )
    next_payment = None
    if upcoming:
        next_payment = {
            "amount": upcoming[0].emi_amount,
            "date": upcoming[0].next_payment_date,
        }

    return {
        "summary": {
            "total_outstanding": total_outstanding,
            "total_principal": total_principal,
            "total_paid": total_principal - total_outstanding,
            "active_loan_count": len(active),
            "average_interest_rate": average_rate,
            "next_payment": next_payment,
        },
        "loans": loans,
    }


def _payoff_year(loan: Loan, today: date) -> int:
    if loan.issue_date and loan.tenure_in_months:
        return (loan.issue_date + relativedelta(months=loan.tenure_in_months)).year
    return today.year + 5


def get_debt_overview(db: Session, user: User, today: Optional[date] = None) -> dict:
    """
    Debt page data: profile figures, one row per loan and a three-year
    balance history of the loans already issued in each year.
    """
    today = today or date.today()
    loans = db.query(Loan).filter(Loan.user_id == user.id).all()

    active_loans = [
        {
            "id": loan.id,
            "type": loan.type,
            "lender": loan.lender,
            "outstanding": loan.outstanding_balance,
            "total_amount": loan.principal_amount,
            "monthly_payment": loan.emi_amount or ZERO,
            "interest_rate": loan.interest_rate,
            "payoff_year": _payoff_year(loan, today),
        }
        for loan in loans
    ]

    debt_history = []
    for year in range(today.year - 2, today.year + 1):
        balance = sum(
            (
                Decimal(loan.outstanding_balance)
                for loan in loans
                if loan.issue_date is None or loan.issue_date.year <= year
            ),
            ZERO,
        )
        debt_history.append({"year": year, "balance": balance})

    return {
        "monthly_income": user.monthly_income or ZERO,
        "total_assets": user.total_assets or ZERO,
        "credit_score": user.credit_score or 0,
        "active_loans": active_loans,
        "debt_history": debt_history,
    }
