"""
Pydantic models for todo items.

Field names on the wire follow the document layout clients already
use: ``_id``, ``completedAt`` (milliseconds since the epoch) and
``_creator``.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class TodoCreate(BaseModel):
    text: str = Field(..., examples=["Buy milk"])


class TodoUpdate(BaseModel):
    """Partial update.  Fields left out of the body are not touched."""

    text: Optional[str] = None
    completed: Optional[bool] = None


class TodoRead(BaseModel):
    """Schema for a todo returned by the API.

    ``completed_at`` is set exactly when ``completed`` is true.
    """

    id: str = Field(..., alias="_id")
    text: str
    completed: bool = False
    completed_at: Optional[int] = Field(None, alias="completedAt")
    creator: str = Field(..., alias="_creator")

    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }


class TodoEnvelope(BaseModel):
    todo: TodoRead


class TodoList(BaseModel):
    todos: List[TodoRead]
