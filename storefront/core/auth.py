# storefront/core/auth.py
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.database import get_session
from storefront.models.user import User

settings = get_settings()

# Missing Authorization header => guest, not an error
bearer_scheme = HTTPBearer(auto_error=False)


def _verification_key() -> str:
    """
    CLERK_JWT_KEY as configured; PEM keys pasted into .env on one line
    carry literal "\\n" sequences.
    """
    if not settings.CLERK_JWT_KEY:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication is not configured",
        )
    return settings.CLERK_JWT_KEY.replace("\\n", "\n")


def decode_session_token(token: str) -> dict[str, Any]:
    """
    Verify a Clerk session token and return its claims.

    Checked: signature (CLERK_JWT_ALG, RS256 by default) and exp.
    Clerk session tokens have no 'aud', so audience is not verified.

    Raises:
        HTTPException(503): no verification key configured.
        HTTPException(401): bad signature, malformed or expired token.
    """
    try:
        return jwt.decode(
            token,
            _verification_key(),
            algorithms=[settings.CLERK_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def _provision_user(session: Session, user_id: str, claims: dict[str, Any]) -> User:
    """
    First request of a user whose user.created webhook has not arrived yet.
    """
    user = User(
        id=user_id,
        email=claims.get("email") or "",
        first_name=claims.get("given_name") or "",
        last_name=claims.get("family_name") or "",
        role="user",
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    The signed-in user, or None for guests.

    The Clerk user id ('sub') is the primary key of the local users table.
    Admins are promoted manually; new rows always start as "user".
    """
    if credentials is None:
        return None

    claims = decode_session_token(credentials.credentials)
    user_id = claims.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub",
        )

    return session.get(User, user_id) or _provision_user(session, user_id, claims)


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """
    Reject guests with 401.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


def require_admin(user: User = Depends(require_auth)) -> User:
    """
    Reject non-admins with 403.
    """
    if user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user
