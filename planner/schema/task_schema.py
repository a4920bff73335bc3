from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from datetime import date, datetime

from planner.model.tasks import TaskFrequency, TaskPriority, TaskStatus


class TaskBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.media
    status: TaskStatus = TaskStatus.pendiente
    due_date: Optional[date] = None
    is_recurring: bool = False
    frequency: Optional[TaskFrequency] = None
    recurrence_end_date: Optional[date] = None

    @field_validator("priority", mode="before")
    @classmethod
    def lower_priority(cls, v):
        # the client sends "Media", "Alta", ...
        return v.lower() if isinstance(v, str) else v

    @field_validator("due_date", "recurrence_end_date", mode="before")
    @classmethod
    def date_only(cls, v):
        if isinstance(v, str) and v:
            return v.split("T")[0]
        return v or None

    @model_validator(mode="after")
    def drop_recurrence_when_single(self):
        if not self.is_recurring:
            self.recurrence_end_date = None
        elif self.frequency is None:
            self.frequency = TaskFrequency.semanal
        return self


class TaskCreate(TaskBase):
    pass


class TaskUpdate(TaskBase):
    pass


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class TaskOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    priority: TaskPriority
    status: TaskStatus
    due_date: Optional[date] = None
    is_recurring: bool
    frequency: Optional[TaskFrequency] = None
    recurrence_end_date: Optional[date] = None
    created_at: datetime
    is_overdue: bool
