from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from planner.database.base_class import Base
from datetime import datetime


class Habit(Base):
    __tablename__ = "habits"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # FK
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # attributes
    title = Column(String(255), nullable=False)
    time = Column(String(50), nullable=True)
    location = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    deactivated_at = Column(DateTime, nullable=True)
    # calendar days in the owner's timezone
    created_on = Column(Date, nullable=True)
    deactivated_on = Column(Date, nullable=True)

    # relationship
    user = relationship("User", back_populates="habits")
    completions = relationship(
        "HabitCompletion",
        back_populates="habit",
        cascade="all, delete-orphan",
        order_by="HabitCompletion.completion_date",
    )


class HabitCompletion(Base):
    __tablename__ = "habit_completions"
    # one check-in per habit per calendar day
    __table_args__ = (UniqueConstraint("habit_id", "completion_date", name="uq_habit_completion_day"),)

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    habit_id = Column(Integer, ForeignKey("habits.id", ondelete="CASCADE"), nullable=False, index=True)
    completion_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    habit = relationship("Habit", back_populates="completions")
