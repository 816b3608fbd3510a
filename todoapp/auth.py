from typing import Annotated, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from sqlmodel import Session

from . import queries
from .database import get_session
from .logger import logger
from .schemas import (
    AuthResponse, SessionRead, SessionResponse, SignInRequest, SignOutResponse,
    SignUpRequest, UserRead,
)
from .security import (
    authenticate_user, clear_session_cookie, cookie_scheme, create_session_token,
    decode_session_token, set_session_cookie,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/sign-up/email", response_model=AuthResponse, summary="Sign up with email and password")
def sign_up_email(
        body: Annotated[SignUpRequest, Body(...)],
        response: Response,
        session: Annotated[Session, Depends(get_session)],
) -> AuthResponse:
    """
    Create a user and open a session for it.
    """
    logger.info(f"Sign-up attempt for user: {body.email}")
    if queries.get_user_by_email(session, body.email):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="User already exists",
        )
    try:
        user = queries.create_user(session, email=body.email, name=body.name, password=body.password)
    except ValueError:
        # Lost a race with a concurrent sign-up for the same email
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="User already exists",
        )

    token = create_session_token(user.id)
    set_session_cookie(response, token)
    logger.info(f"Created user: {user.email}")
    return AuthResponse(token=token, user=UserRead.model_validate(user))


@router.post("/sign-in/email", response_model=AuthResponse, summary="Sign in with email and password")
def sign_in_email(
        body: Annotated[SignInRequest, Body(...)],
        response: Response,
        session: Annotated[Session, Depends(get_session)],
) -> AuthResponse:
    """
    Check credentials and open a session.
    """
    logger.info(f"Login attempt for user: {body.email}")
    user = authenticate_user(session, body.email, body.password)
    if user is None:
        logger.warning(f"Failed login attempt for user: {body.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    token = create_session_token(user.id)
    set_session_cookie(response, token)
    logger.info(f"Successful login for user: {body.email}")
    return AuthResponse(token=token, user=UserRead.model_validate(user))


@router.post("/sign-out", response_model=SignOutResponse, summary="Sign out")
async def sign_out(response: Response) -> SignOutResponse:
    clear_session_cookie(response)
    return SignOutResponse(success=True)


@router.get("/get-session", response_model=Optional[SessionResponse], summary="Get the current session")
def get_session_info(
        session: Annotated[Session, Depends(get_session)],
        token: Annotated[Optional[str], Depends(cookie_scheme)],
) -> Optional[SessionResponse]:
    """
    Return the session behind the cookie, or null when there is none.
    """
    if not token:
        return None
    token_data = decode_session_token(token)
    if token_data is None:
        return None
    user = queries.get_user(session, token_data.user_id)
    if user is None:
        return None
    return SessionResponse(
        session=SessionRead(token=token, user_id=user.id, expires_at=token_data.expires_at),
        user=UserRead.model_validate(user),
    )
