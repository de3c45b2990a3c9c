"""
Top‑level router.

Aggregates the domain routers under their path prefixes.  Paths are
mounted at the application root (``/todos``, ``/users``) because
existing clients call them there.
"""

from fastapi import APIRouter

from .endpoints import todos, users

router = APIRouter()

router.include_router(todos.router, prefix="/todos", tags=["todos"])
router.include_router(users.router, prefix="/users", tags=["users"])
