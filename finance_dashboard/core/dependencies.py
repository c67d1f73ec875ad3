from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from finance_dashboard.core.database import SessionLocal
from finance_dashboard.core.security import decode_access_token
from finance_dashboard.models.user import User
from finance_dashboard.services.user_service import get_user_by_clerk_id, sync_user_from_claims


def get_db():
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# auto_error is off so a missing header yields 401 rather than 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> dict:
    """
    Verify the identity provider's session token and return its claims.
    Raises 401 if the token is missing, invalid, or has no subject.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token payload missing subject",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload


def get_current_user(
    identity: dict = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> User:
    """
    Get the user row for the authenticated identity.
    Raises 404 if the identity has never been synced into the database.
    """
    user = get_user_by_clerk_id(db, identity["sub"])
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


def get_or_create_user(
    identity: dict = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> User:
    """
    Get the user row for the authenticated identity, provisioning it from
    the token claims on first sight.
    """
    try:
        return sync_user_from_claims(db, identity)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
