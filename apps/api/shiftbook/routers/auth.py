from datetime import datetime, timedelta, timezone
from uuid import UUID
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from typing import Optional

from shiftbook.core.database import get_db, store_guard
from shiftbook.core.config import settings
from shiftbook.models.profile import Profile
from shiftbook.services.authorization import Principal, resolve_role

security = HTTPBearer(auto_error=False)

# JWT settings. Tokens are issued by the identity provider; this service only
# verifies them with the shared secret.
SECRET_KEY = settings.jwt_secret_key
ALGORITHM = settings.jwt_algorithm
ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes


def _unauthorized(detail: str = "Invalid authentication credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """Create a JWT access token (development scripts and tests only)."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise _unauthorized()


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Principal:
    """Resolve the bearer token to a Principal. The role comes from the profile."""
    if credentials is None:
        raise _unauthorized("Not authenticated")

    payload = decode_token(credentials.credentials)
    subject = payload.get("sub")
    if subject is None:
        raise _unauthorized()
    try:
        user_id = UUID(subject)
    except ValueError:
        raise _unauthorized()

    with store_guard(db, "resolve caller"):
        profile = db.get(Profile, user_id)
    if profile is None:
        raise _unauthorized("Profile not found")

    return Principal(user_id=profile.profile_id, role=resolve_role(profile.role))
