"""
Todo endpoints.

All routes require authentication and operate only on the caller's
own todos.  A todo that does not exist, has a malformed id or belongs
to another user is reported as ``404`` with an empty body in every
case.
"""

from fastapi import APIRouter

from todo_api.app.api.deps import CurrentUser, TodoServiceDep
from todo_api.app.core.exceptions import NotFound
from todo_api.app.schemas.todo import TodoCreate, TodoEnvelope, TodoList, TodoUpdate


router = APIRouter()


@router.post("", response_model=TodoEnvelope)
async def create_todo(payload: TodoCreate, current_user: CurrentUser, todos: TodoServiceDep) -> TodoEnvelope:
    """Create a todo owned by the caller."""
    todo = await todos.create_todo(current_user["user"].id, payload.text)
    return TodoEnvelope(todo=todo)


@router.get("", response_model=TodoList)
async def list_todos(current_user: CurrentUser, todos: TodoServiceDep) -> TodoList:
    return TodoList(todos=await todos.list_todos(current_user["user"].id))


@router.get("/{todo_id}", response_model=TodoEnvelope)
async def get_todo(todo_id: str, current_user: CurrentUser, todos: TodoServiceDep) -> TodoEnvelope:
    todo = await todos.get_owned(todo_id, current_user["user"].id)
    if todo is None:
        raise NotFound()
    return TodoEnvelope(todo=todo)


@router.patch("/{todo_id}", response_model=TodoEnvelope)
async def update_todo(
    todo_id: str,
    payload: TodoUpdate,
    current_user: CurrentUser,
    todos: TodoServiceDep,
) -> TodoEnvelope:
    """Update ``text`` and/or ``completed``.

    Setting ``completed`` to true records ``completedAt``; setting it
    to false clears it.  Other fields in the body are ignored.
    """
    todo = await todos.update_owned(
        todo_id,
        current_user["user"].id,
        text=payload.text,
        completed=payload.completed,
    )
    if todo is None:
        raise NotFound()
    return TodoEnvelope(todo=todo)


@router.delete("/{todo_id}", response_model=TodoEnvelope)
async def delete_todo(todo_id: str, current_user: CurrentUser, todos: TodoServiceDep) -> TodoEnvelope:
    """Delete a todo and return it."""
    todo = await todos.delete_owned(todo_id, current_user["user"].id)
    if todo is None:
        raise NotFound()
    return TodoEnvelope(todo=todo)
