#!/usr/bin/env python3
"""
Create a user and a few sample todos in a Todo API SQLite database.

The schema is created if the file does not exist yet.  The new user's
auth token is printed so that the API can be exercised right away::

    python seed_db.py --db ./todo_app.db --email demo@example.com --todo "Buy milk" --todo "Walk the dog"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import asyncio
import getpass
import sys

from todo_api.app.core.config import settings
from todo_api.app.core.db import Database
from todo_api.app.core.exceptions import TodoApiError
from todo_api.app.services.todo_service import TodoService
from todo_api.app.services.user_service import UserService


async def seed(db_path: str, email: str, password: str, todos: list[str]) -> str:
    db = Database(db_path)
    db.connect()
    try:
        users = UserService(db, settings)
        user = await users.create_user(email, password)
        token = await users.generate_auth_token(user)
        todo_service = TodoService(db)
        for text in todos:
            await todo_service.create_todo(user.id, text)
        return token
    finally:
        db.close()


def main():
    ap = argparse.ArgumentParser(description="Seed a Todo API database with a user and todos.")
    ap.add_argument("--db", default=settings.database_url, help="Path to SQLite DB file")
    ap.add_argument("--email", required=True, help="Email of the user to create")
    ap.add_argument("--password", help="Password. If omitted, you'll be prompted securely.")
    ap.add_argument("--todo", action="append", default=[], help="Todo text; may be repeated")
    args = ap.parse_args()

    password = args.password or getpass.getpass("Enter password: ")
    try:
        token = asyncio.run(seed(args.db, args.email, password, args.todo))
    except TodoApiError as exc:
        print(f"[!] {exc.message}", file=sys.stderr)
        sys.exit(1)

    print(f"[+] Created {args.email} with {len(args.todo)} todo(s) in {args.db}")
    print(f"x-auth: {token}")


if __name__ == "__main__":
    main()
