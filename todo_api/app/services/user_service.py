"""
Business logic for users.

``UserService`` is the accessor for user documents.  It validates and
normalises signup input, hashes passwords, and manages the per-user
token list that makes logout-by-removal possible.
"""

import json
import logging
import re
import sqlite3
from typing import Optional

from ..core.config import Settings
from ..core.db import Database, is_valid_id, new_id
from ..core.exceptions import DuplicateEmail, InvalidCredentials, InvalidToken, ValidationError
from ..core.security import create_access_token, decode_access_token, hash_password, verify_password
from ..schemas.user import AuthToken, UserInDB

logger = logging.getLogger(__name__)

AUTH_ACCESS = "auth"
MIN_PASSWORD_LENGTH = 6

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _row_to_user(row: sqlite3.Row) -> UserInDB:
    return UserInDB(
        id=row["id"],
        email=row["email"],
        password=row["password"],
        tokens=[AuthToken(**t) for t in json.loads(row["tokens"])],
    )


class UserService:
    """Store accessor for user documents.

    Parameters
    ----------
    db : Database
        Connected store handle.
    settings : Settings
        Supplies the token secret and the password hash cost.
    """

    def __init__(self, db: Database, settings: Settings):
        self.db = db
        self.settings = settings

    async def create_user(self, email: str, password: str) -> UserInDB:
        """Validate input, hash the password and insert a new user.

        Raises
        ------
        ValidationError
            If the email is not an address or the password is shorter
            than ``MIN_PASSWORD_LENGTH``.
        DuplicateEmail
            If a user with the same (normalised) email exists.
        """
        email_value = normalize_email(email)
        if not _EMAIL_RE.match(email_value):
            raise ValidationError(f"{email!r} is not a valid email")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        logger.info("Registering user %s", email_value)
        hashed = hash_password(password, self.settings.password_hash_iterations)
        user_id = new_id()
        try:
            with self.db.cursor() as cursor:
                cursor.execute(
                    "INSERT INTO users (id, email, password, tokens) VALUES (?, ?, ?, '[]')",
                    (user_id, email_value, hashed),
                )
        except sqlite3.IntegrityError as exc:
            logger.info("Signup rejected, email %s already in use", email_value)
            raise DuplicateEmail(f"Email {email_value} is already in use") from exc
        return UserInDB(id=user_id, email=email_value, password=hashed, tokens=[])

    async def get_user_by_id(self, user_id: str) -> Optional[UserInDB]:
        """Retrieve a user by ID."""
        if not is_valid_id(user_id):
            return None
        with self.db.cursor() as cursor:
            row = cursor.execute(
                "SELECT id, email, password, tokens FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        return _row_to_user(row) if row else None

    async def find_by_credentials(self, email: str, password: str) -> UserInDB:
        """Return the user owning ``email`` if ``password`` matches.

        An unknown email and a wrong password raise the same
        ``InvalidCredentials`` error.
        """
        with self.db.cursor() as cursor:
            row = cursor.execute(
                "SELECT id, email, password, tokens FROM users WHERE email = ?",
                (normalize_email(email),),
            ).fetchone()
        if not row or not verify_password(password, row["password"]):
            raise InvalidCredentials()
        return _row_to_user(row)

    async def find_by_token(self, token: str) -> Optional[UserInDB]:
        """Resolve an auth token to its user.

        The signature must verify and the exact token string must still
        be in the user's token list with ``auth`` access.
        """
        try:
            claims = decode_access_token(token, self.settings.secret_key)
        except InvalidToken:
            return None
        user_id = claims.get("_id")
        if not isinstance(user_id, str) or claims.get("access") != AUTH_ACCESS:
            return None
        user = await self.get_user_by_id(user_id)
        if user is None:
            return None
        if not any(t.token == token and t.access == AUTH_ACCESS for t in user.tokens):
            return None
        return user

    async def generate_auth_token(self, user: UserInDB) -> str:
        """Issue a new auth token for ``user`` and store it."""
        token = create_access_token({"_id": user.id, "access": AUTH_ACCESS}, self.settings.secret_key)
        await self.add_token(user, AUTH_ACCESS, token)
        return token

    async def add_token(self, user: UserInDB, access: str, token: str) -> None:
        with self.db.cursor() as cursor:
            row = cursor.execute("SELECT tokens FROM users WHERE id = ?", (user.id,)).fetchone()
            if not row:
                return
            tokens = json.loads(row["tokens"])
            tokens.append({"access": access, "token": token})
            cursor.execute(
                "UPDATE users SET tokens = ? WHERE id = ?", (json.dumps(tokens), user.id)
            )
        user.tokens.append(AuthToken(access=access, token=token))

    async def remove_token(self, user: UserInDB, token: str) -> None:
        """Drop every entry carrying ``token``.  Absent tokens are ignored."""
        with self.db.cursor() as cursor:
            row = cursor.execute("SELECT tokens FROM users WHERE id = ?", (user.id,)).fetchone()
            if not row:
                return
            tokens = [t for t in json.loads(row["tokens"]) if t["token"] != token]
            cursor.execute(
                "UPDATE users SET tokens = ? WHERE id = ?", (json.dumps(tokens), user.id)
            )
        user.tokens = [t for t in user.tokens if t.token != token]
        logger.info("Removed token for user %s", user.id)
