"""
Request dependencies: store accessors and the authentication guard.

The ``Database`` and ``Settings`` instances are attached to
``app.state`` by ``main.create_app``; the dependencies below build
services around them per request.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Header, Request

from ..core.config import Settings
from ..core.db import Database
from ..core.exceptions import Unauthenticated
from ..services.todo_service import TodoService
from ..services.user_service import UserService

logger = logging.getLogger(__name__)

AUTH_HEADER = "x-auth"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_user_service(
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> UserService:
    return UserService(db, settings)


def get_todo_service(db: Database = Depends(get_db)) -> TodoService:
    return TodoService(db)


async def get_current_user(
    x_auth: Optional[str] = Header(None, alias=AUTH_HEADER),
    users: UserService = Depends(get_user_service),
) -> dict:
    """Dependency that retrieves the current authenticated user.

    Reads the token from the ``x-auth`` header and resolves it with
    ``UserService.find_by_token``.  Returns ``{"user": UserInDB,
    "token": str}``.  A missing, forged or logged-out token raises
    ``Unauthenticated`` and the route handler is never called.
    """
    if not x_auth:
        raise Unauthenticated()
    user = await users.find_by_token(x_auth)
    if user is None:
        logger.debug("Rejected request with unknown or revoked token")
        raise Unauthenticated()
    return {"user": user, "token": x_auth}


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
TodoServiceDep = Annotated[TodoService, Depends(get_todo_service)]
CurrentUser = Annotated[dict, Depends(get_current_user)]
