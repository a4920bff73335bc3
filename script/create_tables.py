# create_tables.py
from sqlalchemy import inspect, func

from planner.database import ENGINE, get_ctx_db
from planner.database.base_class import Base
from planner.database.session import SQLALCHEMY_DATABASE_URL
from planner.model import Habit, HabitCompletion, Task, User

Base.metadata.create_all(bind=ENGINE)
print("Tables created.")

inspector = inspect(ENGINE)
print("Existing tables:", inspector.get_table_names())

with get_ctx_db(SQLALCHEMY_DATABASE_URL) as db:
    for model in (User, Habit, HabitCompletion, Task):
        print(f"  - {model.__tablename__}: {db.query(func.count()).select_from(model).scalar()} rows")
