"""
Pydantic models for user data.

``UserCreate`` is the body accepted by signup and login.  ``UserRead``
is what the API returns: only the identifier and the email, never the
password hash or the token list, which live on ``UserInDB``.
"""

from typing import List

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Schema for signing up or logging in.

    Only the shape is checked here.  Email format and password length
    are validated by ``UserService.create_user`` so that both failures
    are reported the same way as a duplicate email.
    """

    email: str = Field(..., examples=["user@example.com"])
    password: str = Field(..., examples=["secret123"])


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    id: str = Field(..., alias="_id")
    email: str

    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }


class AuthToken(BaseModel):
    """One entry of a user's token list."""

    access: str
    token: str


class UserInDB(BaseModel):
    """Full user document as stored."""

    id: str
    email: str
    password: str
    tokens: List[AuthToken] = []

    def to_read(self) -> UserRead:
        return UserRead(id=self.id, email=self.email)
