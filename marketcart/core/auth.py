# marketcart/core/auth.py
import uuid
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from marketcart.core.config import get_settings
from marketcart.core.errors import UnauthorizedError
from marketcart.database import get_session
from marketcart.models.user import User

settings = get_settings()

# A missing header resolves to a guest, not a 401.
bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify a bearer JWT (signature, and `exp` when present) and return
    its claims. Audience is not checked.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError as exc:
        raise UnauthorizedError("Invalid or expired token") from exc


def _identity_from_claims(claims: dict[str, Any]) -> tuple[uuid.UUID, str]:
    sub = claims.get("sub")
    email = claims.get("email")
    if not sub or not email:
        raise UnauthorizedError("Token missing sub/email")
    try:
        return uuid.UUID(sub), email
    except ValueError as exc:
        raise UnauthorizedError("Invalid sub in token") from exc


def _provision_user(session: Session, user_id: uuid.UUID, email: str) -> User:
    user = User(id=user_id, email=email, name=email.partition("@")[0])
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Resolve the caller from the Authorization header.

    No header means a guest (None). A token whose subject has no user row
    yet gets one created on first sight.
    """
    if credentials is None:
        return None

    user_id, email = _identity_from_claims(decode_access_token(credentials.credentials))
    return session.get(User, user_id) or _provision_user(session, user_id, email)


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    if user is None:
        raise UnauthorizedError("Authentication required")
    return user
