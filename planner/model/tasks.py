from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from planner.database.base_class import Base
from datetime import datetime
from enum import Enum as PyEnum


class TaskPriority(PyEnum):
    baja = "baja"
    media = "media"
    alta = "alta"


class TaskStatus(PyEnum):
    pendiente = "Pendiente"
    completada = "Completada"


class TaskFrequency(PyEnum):
    diaria = "Diaria"
    semanal = "Semanal"
    mensual = "Mensual"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    priority = Column(
        SAEnum(TaskPriority, name="task_priority", values_callable=lambda e: [m.value for m in e], validate_strings=True),
        nullable=False,
        default=TaskPriority.media,
    )
    status = Column(
        SAEnum(TaskStatus, name="task_status", values_callable=lambda e: [m.value for m in e], validate_strings=True),
        nullable=False,
        default=TaskStatus.pendiente,
    )
    due_date = Column(Date, nullable=True)

    # recurrence
    is_recurring = Column(Boolean, default=False, nullable=False)
    frequency = Column(
        SAEnum(TaskFrequency, name="task_frequency", values_callable=lambda e: [m.value for m in e], validate_strings=True),
        nullable=True,
    )
    recurrence_end_date = Column(Date, nullable=True)

    created_at = Column(DateTime, default=datetime.now, nullable=False)

    user = relationship("User", back_populates="tasks")
