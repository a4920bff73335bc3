from planner.router.api.auth import router as auth_router
from planner.router.api.habits import router as habits_router
from planner.router.api.tasks import router as tasks_router
__all__ = [
    "auth_router",
    "habits_router",
    "tasks_router",
]
