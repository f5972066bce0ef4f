from typing import Literal
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Path, Query, Request
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.trackers import Todo
from app.models.user import User
from app.routes.auth import get_current_user
from app.schemas.tracker_schemas import TodoCreate, TodoItem, TodoUpdate
from app.services.activity_logger import log_activity
from app.services.trackers import sort_todos

router = APIRouter(prefix="/todos", tags=["Todos"])


def _get_owned_todo(db: Session, todo_id: UUID, user: User) -> Todo:
    todo = (
        db.query(Todo)
        .filter(Todo.id == todo_id, Todo.user_id == user.id)
        .first()
    )
    if not todo:
        raise HTTPException(status_code=404, detail="Todo not found")
    return todo


@router.get("/")
def list_todos(
    sort_by: Literal["date", "priority", "title"] = Query("date"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    todos = db.query(Todo).filter(Todo.user_id == current_user.id).all()
    ordered = sort_todos(todos, sort_by)

    return {
        "count": len(ordered),
        "completed": sum(1 for t in ordered if t.completed),
        "data": [TodoItem.model_validate(t) for t in ordered],
    }


@router.post("/", response_model=TodoItem, status_code=201)
def add_todo(
    payload: TodoCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    todo = Todo(
        user_id=current_user.id,
        title=payload.title,
        completed=payload.completed,
        priority=payload.priority.value,
    )
    db.add(todo)
    db.commit()
    db.refresh(todo)

    background_tasks.add_task(
        log_activity,
        current_user.id,
        "ADDED_TODO",
        {"title": todo.title, "priority": todo.priority},
        request.headers.get("user-agent"),
    )
    return todo


@router.patch("/{todo_id}", response_model=TodoItem)
def update_todo(
    payload: TodoUpdate,
    request: Request,
    background_tasks: BackgroundTasks,
    todo_id: UUID = Path(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    todo = _get_owned_todo(db, todo_id, current_user)

    updates = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "priority" in updates:
        updates["priority"] = updates["priority"].value
    for field, value in updates.items():
        setattr(todo, field, value)

    db.add(todo)
    db.commit()
    db.refresh(todo)

    background_tasks.add_task(
        log_activity,
        current_user.id,
        "UPDATED_TODO",
        {"todoId": str(todo.id), "completed": todo.completed},
        request.headers.get("user-agent"),
    )
    return todo


@router.delete("/{todo_id}")
def delete_todo(
    request: Request,
    background_tasks: BackgroundTasks,
    todo_id: UUID = Path(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    todo = _get_owned_todo(db, todo_id, current_user)
    db.delete(todo)
    db.commit()

    background_tasks.add_task(
        log_activity,
        current_user.id,
        "DELETED_TODO",
        {"todoId": str(todo_id)},
        request.headers.get("user-agent"),
    )
    return {"status": "todo_deleted"}
