from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from finance_dashboard.core.dependencies import get_db, get_or_create_user
from finance_dashboard.logger_config import logger
from finance_dashboard.models.user import User
from finance_dashboard.schemas.savings import SavingsJarCreate, SavingsJarResponse, SavingsJarUpdate
from finance_dashboard.services.savings_service import create_jar, delete_jar, get_jars, update_jar

router = APIRouter()


@router.get("", response_model=List[SavingsJarResponse])
def list_savings_jars(
    current_user: User = Depends(get_or_create_user),
    db: Session = Depends(get_db),
):
    """List the caller's savings jars, newest first."""
    try:
        return [SavingsJarResponse.model_validate(jar) for jar in get_jars(db, current_user.id)]
    except Exception as e:
        logger.exception("Error fetching savings jars")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("", response_model=SavingsJarResponse, status_code=status.HTTP_201_CREATED)
def create_savings_jar(
    data: SavingsJarCreate,
    current_user: User = Depends(get_or_create_user),
    db: Session = Depends(get_db),
):
    try:
        jar = create_jar(
            db,
            user_id=current_user.id,
            name=data.name,
            target_amount=data.target_amount,
            current_amount=data.current_amount,
            goal_date=data.goal_date,
            notes=data.notes,
        )
        logger.info(f"Savings jar {jar.id} created by {current_user.id}")
        return SavingsJarResponse.model_validate(jar)
    except Exception as e:
        logger.exception("Error creating savings jar")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.patch("/{jar_id}", response_model=SavingsJarResponse)
def update_savings_jar(
    jar_id: str,
    data: SavingsJarUpdate,
    current_user: User = Depends(get_or_create_user),
    db: Session = Depends(get_db),
):
    """
    Rename, retarget or annotate a jar, and/or move money with deposit_delta
    (positive deposits, negative withdraws; the balance stops at zero).
    """
    try:
        jar = update_jar(
            db,
            user_id=current_user.id,
            jar_id=jar_id,
            name=data.name,
            target_amount=data.target_amount,
            notes=data.notes,
            deposit_delta=data.deposit_delta,
        )
    except Exception as e:
        logger.exception(f"Error updating savings jar {jar_id}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    if not jar:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Savings jar not found")
    return SavingsJarResponse.model_validate(jar)


@router.delete("/{jar_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_savings_jar(
    jar_id: str,
    current_user: User = Depends(get_or_create_user),
    db: Session = Depends(get_db),
):
    try:
        deleted = delete_jar(db, user_id=current_user.id, jar_id=jar_id)
    except Exception as e:
        logger.exception(f"Error deleting savings jar {jar_id}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Savings jar not found")
    logger.info(f"Savings jar {jar_id} deleted by {current_user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
