"""
User endpoints.

Signup, login, the current user's profile and logout.  Signup and
login return the user in the body and a fresh auth token in the
``x-auth`` response header; clients send that token back in the
``x-auth`` request header.
"""

import logging

from fastapi import APIRouter, Response

from todo_api.app.api.deps import AUTH_HEADER, CurrentUser, UserServiceDep
from todo_api.app.schemas.user import UserCreate, UserRead

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=UserRead)
async def register_user(payload: UserCreate, response: Response, users: UserServiceDep) -> UserRead:
    """Register a new user and log them in.

    Invalid email, short password or an email already in use answer
    ``400``.
    """
    user = await users.create_user(payload.email, payload.password)
    token = await users.generate_auth_token(user)
    response.headers[AUTH_HEADER] = token
    return user.to_read()


@router.post("/login", response_model=UserRead)
async def login_user(payload: UserCreate, response: Response, users: UserServiceDep) -> UserRead:
    """Authenticate by email and password and issue a new token.

    Unknown email and wrong password both answer ``400`` without an
    ``x-auth`` header.
    """
    user = await users.find_by_credentials(payload.email, payload.password)
    token = await users.generate_auth_token(user)
    logger.info("User %s logged in", user.id)
    response.headers[AUTH_HEADER] = token
    return user.to_read()


@router.get("/me", response_model=UserRead)
async def read_me(current_user: CurrentUser) -> UserRead:
    return current_user["user"].to_read()


@router.delete("/me/token")
async def logout(current_user: CurrentUser, users: UserServiceDep) -> Response:
    """Revoke the token used for this request."""
    await users.remove_token(current_user["user"], current_user["token"])
    return Response(status_code=200)
