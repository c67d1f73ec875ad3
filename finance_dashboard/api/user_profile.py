from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from finance_dashboard.core.dependencies import get_current_user, get_db, get_or_create_user
from finance_dashboard.logger_config import logger
from finance_dashboard.models.user import User
from finance_dashboard.schemas.user import UserProfileSummary, UserProfileUpdate, UserResponse
from finance_dashboard.services.user_service import get_profile_summary, update_profile

router = APIRouter()


@router.get("", response_model=UserProfileSummary)
def user_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Income, assets, credit score and debt ratios for the debt analytics pages."""
    try:
        return UserProfileSummary(**get_profile_summary(db, current_user))
    except Exception as e:
        logger.exception("Error building user profile")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_or_create_user)):
    """Return the caller, creating the record on first sign-in."""
    return UserResponse.model_validate(current_user)


@router.patch("", response_model=UserResponse)
def update_user_profile(
    data: UserProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        user = update_profile(
            db,
            current_user,
            name=data.name,
            monthly_income=data.monthly_income,
            credit_score=data.credit_score,
            whatsapp_number=data.whatsapp_number,
        )
        logger.info(f"Profile updated for {current_user.id}")
        return UserResponse.model_validate(user)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
