from planner.model.habits import Habit, HabitCompletion
from planner.model.tasks import Task
from planner.model.users import User

__all__ = ["User", "Habit", "HabitCompletion", "Task"]
