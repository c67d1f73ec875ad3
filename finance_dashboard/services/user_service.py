from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from finance_dashboard.core.security import display_name_from_claims
from finance_dashboard.logger_config import logger
from finance_dashboard.models.account import Account
from finance_dashboard.models.loan import Loan, LoanStatus
from finance_dashboard.models.user import User
from finance_dashboard.utils.phone import normalize_phone_number

DEFAULT_MONTHLY_INCOME = Decimal("80000")


def get_user_by_clerk_id(db: Session, clerk_user_id: str) -> Optional[User]:
    """Get user by identity provider subject."""
    return db.query(User).filter(User.clerk_user_id == clerk_user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get user by email."""
    return db.query(User).filter(User.email == email).first()


def get_user_by_whatsapp_number(db: Session, number: str) -> Optional[User]:
    """Get the user a WhatsApp sender number is linked to."""
    normalized = normalize_phone_number(number)
    if not normalized:
        return None
    return db.query(User).filter(User.whatsapp_number == normalized).first()


def sync_user_from_claims(db: Session, claims: dict) -> User:
    """
    Return the user for the token subject, creating it on first login.

    When the email already belongs to another row (the provider re-issued
    the account), that row is re-linked to the new subject.
    """
    clerk_user_id = claims["sub"]
    user = get_user_by_clerk_id(db, clerk_user_id)
    if user:
        return user

    email = claims.get("email") or ""
    existing = get_user_by_email(db, email) if email else None
    if existing:
        existing.clerk_user_id = clerk_user_id
        try:
            db.commit()
            db.refresh(existing)
        except IntegrityError as e:
            db.rollback()
            logger.error(f"Error re-linking user {existing.id}: {str(e)}")
            raise ValueError("Failed to link existing user.")
        logger.info(f"Re-linked user {existing.id} to subject {clerk_user_id}")
        return existing

    user = User(
        clerk_user_id=clerk_user_id,
        email=email or f"{clerk_user_id}@users.noreply",
        name=display_name_from_claims(claims),
        image_url=claims.get("image_url"),
    )
    db.add(user)
    try:
        db.commit()
        db.refresh(user)
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error creating user: {str(e)}")
        raise ValueError("Failed to create user.")

    logger.info(f"Provisioned user {user.id} for subject {clerk_user_id}")
    return user


def update_profile(
    db: Session,
    user: User,
    name: Optional[str] = None,
    monthly_income: Optional[Decimal] = None,
    credit_score: Optional[int] = None,
    whatsapp_number: Optional[str] = None,
) -> User:
    """Update the profile figures used by the debt analytics."""
    if name is not None:
        user.name = name
    if monthly_income is not None:
        user.monthly_income = monthly_income
    if credit_score is not None:
        user.credit_score = credit_score
    if whatsapp_number is not None:
        user.whatsapp_number = normalize_phone_number(whatsapp_number) or None

    try:
        db.commit()
        db.refresh(user)
        return user
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error updating profile: {str(e)}")
        raise ValueError("Failed to update profile.")


def get_profile_summary(db: Session, user: User) -> dict:
    """
    Debt analytics for the profile page.

    Total assets are the sum of account balances. Monthly income falls back
    to a twelfth of the assets, or a flat default when there are none.
    Ratios are computed over ACTIVE loans only.
    """
    accounts = db.query(Account).filter(Account.user_id == user.id).all()
    total_assets = sum((Decimal(acc.balance) for acc in accounts), Decimal("0"))

    monthly_income = Decimal(user.monthly_income) if user.monthly_income else Decimal("0")
    if monthly_income <= 0:
        monthly_income = (
            (total_assets / 12).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
            if total_assets > 0
            else DEFAULT_MONTHLY_INCOME
        )

    credit_score = user.credit_score
    credit_score_missing = False
    if not credit_score or credit_score <= 0:
        credit_score_missing = True
        credit_score = None

    loans = (
        db.query(Loan)
        .filter(Loan.user_id == user.id, Loan.status == LoanStatus.ACTIVE)
        .all()
    )
    total_debt = sum((Decimal(l.outstanding_balance) for l in loans), Decimal("0"))
    total_monthly_payments = sum((Decimal(l.emi_amount or 0) for l in loans), Decimal("0"))

    dti_ratio = float(total_monthly_payments / monthly_income * 100) if monthly_income > 0 else 0.0
    debt_to_assets_ratio = float(total_debt / total_assets * 100) if total_assets > 0 else 0.0

    return {
        "monthly_income": monthly_income,
        "total_assets": total_assets,
        "credit_score": credit_score,
        "credit_score_missing": credit_score_missing,
        "dti_ratio": dti_ratio,
        "debt_to_assets_ratio": debt_to_assets_ratio,
        "total_debt": total_debt,
        "total_monthly_payments": total_monthly_payments,
    }
