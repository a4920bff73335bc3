from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from planner.database.base_class import Base
from datetime import datetime
from planner.model.habits import Habit
from planner.model.tasks import Task


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False, default="")
    email = Column(String(255), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    timezone = Column(String(64), nullable=True)
    created_at = Column(DateTime, default=datetime.now)
    last_login_time = Column(DateTime, nullable=True)

    # password reset
    reset_token_hash = Column(String(64), nullable=True, index=True)
    reset_token_expires_at = Column(DateTime, nullable=True)

    habits = relationship("Habit", back_populates="user", cascade="all, delete-orphan")
    tasks = relationship("Task", back_populates="user", cascade="all, delete-orphan")
