from typing import Optional

import jwt

from finance_dashboard.core.config import settings
from finance_dashboard.logger_config import logger


def decode_access_token(token: str) -> Optional[dict]:
    """
    Verify a session token issued by the identity provider.
    Returns the claims, or None if the token is invalid or expired.
    """
    options = {"verify_aud": False}
    try:
        return jwt.decode(
            token,
            settings.AUTH_JWT_KEY,
            algorithms=settings.AUTH_JWT_ALGORITHMS,
            issuer=settings.AUTH_JWT_ISSUER,
            options=options,
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired session token")
        return None
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected invalid session token: {e}")
        return None


def display_name_from_claims(claims: dict) -> str:
    """Build a display name from the provider's claims, 'User' when none is given."""
    if claims.get("name"):
        return claims["name"]
    name = f"{claims.get('first_name') or ''} {claims.get('last_name') or ''}".strip()
    return name or "User"
