from datetime import date, datetime
from typing import Dict, List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from planner.log import get_logger
from planner.model.tasks import Task, TaskPriority, TaskStatus
from planner.model.users import User
from planner.schema.task_schema import TaskCreate, TaskOut, TaskStatusUpdate, TaskUpdate

log = get_logger(__name__)

PRIORITY_ORDER = {TaskPriority.alta: 0, TaskPriority.media: 1, TaskPriority.baja: 2}


def is_task_overdue(task: Task, today: date) -> bool:
    return task.status == TaskStatus.pendiente and task.due_date is not None and task.due_date < today


def _task_out(task: Task, today: date) -> TaskOut:
    return TaskOut(
        id=task.id,
        title=task.title,
        description=task.description,
        priority=task.priority,
        status=task.status,
        due_date=task.due_date,
        is_recurring=task.is_recurring,
        frequency=task.frequency,
        recurrence_end_date=task.recurrence_end_date,
        created_at=task.created_at,
        is_overdue=is_task_overdue(task, today),
    )


def _get_owned_task(db: Session, user: User, task_id: int) -> Task:
    task = db.query(Task).filter(Task.id == task_id, Task.user_id == user.id).first()
    if not task:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tarea no encontrada")
    return task


def _validate_recurrence(request: TaskCreate):
    if request.is_recurring and request.recurrence_end_date and request.due_date:
        if request.recurrence_end_date < request.due_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La recurrencia no puede terminar antes de la fecha de vencimiento",
            )


def list_tasks_logic(db: Session, user: User, today: date) -> List[TaskOut]:
    """Pending first, then alta > media > baja, then by due date."""
    tasks = db.query(Task).filter(Task.user_id == user.id).all()
    tasks.sort(key=lambda t: (
        t.status == TaskStatus.completada,
        PRIORITY_ORDER[t.priority],
        t.due_date or date.max,
        t.id,
    ))
    return [_task_out(t, today) for t in tasks]


def create_task_logic(db: Session, user: User, request: TaskCreate, today: date) -> TaskOut:
    _validate_recurrence(request)
    task = Task(user_id=user.id, created_at=datetime.now(), **request.model_dump())
    db.add(task)
    db.commit()
    db.refresh(task)
    log.info("CREATE task %s - User: %s - SUCCESS", task.id, user.id)
    return _task_out(task, today)


def update_task_logic(db: Session, user: User, task_id: int, request: TaskUpdate, today: date) -> TaskOut:
    task = _get_owned_task(db, user, task_id)
    _validate_recurrence(request)
    for field, value in request.model_dump().items():
        setattr(task, field, value)
    db.commit()
    db.refresh(task)
    log.info("UPDATE task %s - User: %s - SUCCESS", task.id, user.id)
    return _task_out(task, today)


def update_task_status_logic(
    db: Session, user: User, task_id: int, request: TaskStatusUpdate, today: date
) -> TaskOut:
    task = _get_owned_task(db, user, task_id)
    task.status = request.status
    db.commit()
    db.refresh(task)
    log.info("UPDATE task %s status=%s - User: %s - SUCCESS", task.id, task.status.value, user.id)
    return _task_out(task, today)


def delete_task_logic(db: Session, user: User, task_id: int) -> Dict[str, str]:
    task = _get_owned_task(db, user, task_id)
    db.delete(task)
    db.commit()
    log.info("DELETE task %s - User: %s - SUCCESS", task_id, user.id)
    return {"message": "Tarea eliminada"}
