"""Authentication endpoints for registration, login and the session cookie."""

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.init_db import get_db
from tracker.core.errors import HashError, InsertFailed, Unauthorized
from tracker.core.schemas import MessageResponse
from tracker.core.security import PasswordHasher, SessionCookie, TokenService
from tracker.user.repository import UserRepository
from tracker.user import schemas

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["authentication"])


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_session_cookie(request: Request) -> SessionCookie:
    return request.app.state.session_cookie


async def get_current_user(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
    session_cookie: SessionCookie = Depends(get_session_cookie),
) -> schemas.SessionUser:
    """Resolve the session cookie into the caller's identity or reject with 401."""
    token = request.cookies.get(session_cookie.name)
    if not token:
        raise Unauthorized()
    return tokens.verify(token)


@router.post("/register", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_in: schemas.UserCredentials,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
) -> schemas.UserResponse:
    """Create a new user account."""
    repo = UserRepository(db)

    if await repo.exists(user_in.username):
        logger.warning(f"Registration failed: username {user_in.username!r} already exists")
        raise InsertFailed("Registration failed")

    try:
        password_hash = await run_in_threadpool(hasher.hash, user_in.password)
    except HashError as exc:
        logger.warning(f"Registration failed for {user_in.username!r}: {exc.message}")
        raise InsertFailed("Registration failed") from exc

    try:
        user = await repo.create(user_in.username, password_hash)
    except SQLAlchemyError as exc:
        logger.error(f"Database error during registration of {user_in.username!r}: {exc}", exc_info=True)
        raise InsertFailed("Registration failed") from exc

    logger.info(f"User created with ID: {user.id}")
    return schemas.UserResponse(data=schemas.User.model_validate(user))


@router.post("/login", response_model=MessageResponse)
async def login(
    credentials: schemas.UserCredentials,
    response: Response,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
    tokens: TokenService = Depends(get_token_service),
    session_cookie: SessionCookie = Depends(get_session_cookie),
) -> MessageResponse:
    """Check credentials and set the session cookie."""
    user = await UserRepository(db).get_by_username(credentials.username)

    if user is None:
        await run_in_threadpool(hasher.verify_dummy, credentials.password)
        valid = False
    else:
        valid = await run_in_threadpool(hasher.verify, credentials.password, user.password)

    if not valid:
        logger.warning(f"Login failed for user: {credentials.username!r}")
        raise Unauthorized("Invalid username or password")

    token = tokens.issue(schemas.SessionUser(id=user.id, username=user.username))
    session_cookie.set(response, token)
    logger.info(f"Login successful for user_id: {user.id}")
    return MessageResponse(message="Login successful")


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    session_cookie: SessionCookie = Depends(get_session_cookie),
) -> MessageResponse:
    """Clear the session cookie. Issued tokens stay valid until they expire."""
    session_cookie.clear(response)
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=schemas.SessionResponse)
async def me(
    current_user: schemas.SessionUser = Depends(get_current_user),
) -> schemas.SessionResponse:
    """Return the identity carried by the session."""
    return schemas.SessionResponse(data=current_user)
