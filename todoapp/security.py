import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Response, status
from fastapi.security import APIKeyCookie
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel
from sqlmodel import Session

from . import config, models, queries
from .database import get_session
from .logger import logger

SECRET_KEY = config.SECRET_KEY
if not SECRET_KEY:
    # Sessions will not survive a restart with a per-process key
    SECRET_KEY = secrets.token_hex(32)
    logger.warning("No SECRET_KEY found in environment. Using a generated key.")

ALGORITHM = "HS256"
SESSION_EXPIRE_MINUTES = config.SESSION_EXPIRE_MINUTES
SESSION_COOKIE_NAME = config.SESSION_COOKIE_NAME

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
cookie_scheme = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)


class TokenData(BaseModel):
    user_id: str
    expires_at: datetime


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def create_session_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=SESSION_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"sub": user_id, "exp": expire}
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_session_token(token: str) -> Optional[TokenData]:
    """Return the token's claims, or None if it is forged, expired or malformed."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    user_id = payload.get("sub")
    exp = payload.get("exp")
    if not user_id or exp is None:
        return None
    return TokenData(user_id=user_id, expires_at=datetime.fromtimestamp(exp, tz=timezone.utc))


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_EXPIRE_MINUTES * 60,
        path="/",
        httponly=True,
        samesite="lax",
        secure=config.SESSION_COOKIE_SECURE,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        samesite="lax",
        secure=config.SESSION_COOKIE_SECURE,
    )


def authenticate_user(session: Session, email: str, password: str) -> Optional[models.User]:
    user = queries.get_user_by_email(session, email)
    if not user or not user.verify_password(password):
        return None
    return user


def get_current_user(
        session: Session = Depends(get_session),
        token: Optional[str] = Depends(cookie_scheme),
) -> models.User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
    )
    if not token:
        raise credentials_exception
    token_data = decode_session_token(token)
    if token_data is None:
        raise credentials_exception
    user = queries.get_user(session, token_data.user_id)
    if user is None:
        raise credentials_exception
    return user
