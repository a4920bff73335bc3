from datetime import date
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from planner.database import get_db
from planner.model.users import User
from planner.router.api.logics.task_logic import (
    create_task_logic,
    delete_task_logic,
    list_tasks_logic,
    update_task_logic,
    update_task_status_logic,
)
from planner.router.dependencies import get_current_user, get_today
from planner.schema.auth_schema import MessageOut
from planner.schema.task_schema import TaskCreate, TaskOut, TaskStatusUpdate, TaskUpdate

router = APIRouter()


@router.get("", response_model=List[TaskOut], status_code=status.HTTP_200_OK)
async def get_tasks(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    today: date = Depends(get_today),
):
    return list_tasks_logic(db, user, today)


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
async def create_task(
    request: TaskCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    today: date = Depends(get_today),
):
    return create_task_logic(db, user, request, today)


@router.put("/{task_id}", response_model=TaskOut, status_code=status.HTTP_200_OK)
async def update_task(
    task_id: int,
    request: TaskUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    today: date = Depends(get_today),
):
    return update_task_logic(db, user, task_id, request, today)


@router.put("/{task_id}/status", response_model=TaskOut, status_code=status.HTTP_200_OK)
async def update_task_status(
    task_id: int,
    request: TaskStatusUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    today: date = Depends(get_today),
):
    """Toggle between Pendiente and Completada."""
    return update_task_status_logic(db, user, task_id, request, today)


@router.delete("/{task_id}", response_model=MessageOut, status_code=status.HTTP_200_OK)
async def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return delete_task_logic(db, user, task_id)
