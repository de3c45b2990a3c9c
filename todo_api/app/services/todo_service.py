"""
Service for todo items.

Every read and write except creation is owner-scoped: the query
filters on both the todo id and the creator, and a miss for either
reason returns ``None``.  Callers answer 404 in both cases so that
one user cannot learn whether another user's todo exists.
"""

import logging
import sqlite3
import time
from typing import List, Optional

from ..core.db import Database, is_valid_id, new_id
from ..core.exceptions import ValidationError
from ..schemas.todo import TodoRead

logger = logging.getLogger(__name__)

_COLUMNS = "id, text, completed, completed_at, creator"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _clean_text(text: str) -> str:
    cleaned = text.strip()
    if not cleaned:
        raise ValidationError("Todo text must not be empty")
    return cleaned


def _row_to_todo(row: sqlite3.Row) -> TodoRead:
    return TodoRead(
        id=row["id"],
        text=row["text"],
        completed=bool(row["completed"]),
        completed_at=row["completed_at"],
        creator=row["creator"],
    )


class TodoService:
    """Store accessor for todo documents."""

    def __init__(self, db: Database):
        self.db = db

    async def create_todo(self, creator_id: str, text: str) -> TodoRead:
        """Insert a new, not yet completed todo owned by ``creator_id``."""
        cleaned = _clean_text(text)
        todo_id = new_id()
        with self.db.cursor() as cursor:
            cursor.execute(
                "INSERT INTO todos (id, text, completed, completed_at, creator) "
                "VALUES (?, ?, 0, NULL, ?)",
                (todo_id, cleaned, creator_id),
            )
        logger.info("User %s created todo %s", creator_id, todo_id)
        return TodoRead(id=todo_id, text=cleaned, completed=False, completed_at=None, creator=creator_id)

    async def list_todos(self, creator_id: str) -> List[TodoRead]:
        with self.db.cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {_COLUMNS} FROM todos WHERE creator = ? ORDER BY seq",
                (creator_id,),
            ).fetchall()
        return [_row_to_todo(row) for row in rows]

    async def get_owned(self, todo_id: str, owner_id: str) -> Optional[TodoRead]:
        if not is_valid_id(todo_id):
            return None
        with self.db.cursor() as cursor:
            row = cursor.execute(
                f"SELECT {_COLUMNS} FROM todos WHERE id = ? AND creator = ?",
                (todo_id, owner_id),
            ).fetchone()
        return _row_to_todo(row) if row else None

    async def update_owned(
        self,
        todo_id: str,
        owner_id: str,
        text: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Optional[TodoRead]:
        """Apply a partial update to an owned todo.

        ``completed=True`` stamps ``completed_at`` with the current time
        and ``completed=False`` clears it.  When ``completed`` is
        ``None`` both fields keep their stored values.

        Raises
        ------
        ValidationError
            If ``text`` is given and empty after trimming.
        """
        if not is_valid_id(todo_id):
            return None
        fields = []
        values: list = []
        if text is not None:
            fields.append("text = ?")
            values.append(_clean_text(text))
        if completed is True:
            fields.append("completed = 1")
            fields.append("completed_at = ?")
            values.append(_now_ms())
        elif completed is False:
            fields.append("completed = 0")
            fields.append("completed_at = NULL")
        with self.db.cursor() as cursor:
            if fields:
                cursor.execute(
                    f"UPDATE todos SET {', '.join(fields)} WHERE id = ? AND creator = ?",
                    (*values, todo_id, owner_id),
                )
                if cursor.rowcount == 0:
                    return None
            row = cursor.execute(
                f"SELECT {_COLUMNS} FROM todos WHERE id = ? AND creator = ?",
                (todo_id, owner_id),
            ).fetchone()
        if not row:
            return None
        logger.info("User %s updated todo %s", owner_id, todo_id)
        return _row_to_todo(row)

    async def delete_owned(self, todo_id: str, owner_id: str) -> Optional[TodoRead]:
        """Remove an owned todo and return it as it was before removal."""
        if not is_valid_id(todo_id):
            return None
        with self.db.cursor() as cursor:
            row = cursor.execute(
                f"SELECT {_COLUMNS} FROM todos WHERE id = ? AND creator = ?",
                (todo_id, owner_id),
            ).fetchone()
            if not row:
                return None
            cursor.execute("DELETE FROM todos WHERE id = ?", (todo_id,))
        logger.info("User %s deleted todo %s", owner_id, todo_id)
        return _row_to_todo(row)
