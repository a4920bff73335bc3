from typing import Generator
from contextlib import contextmanager
from sqlalchemy.orm import sessionmaker
from planner.database.session import SQLALCHEMY_DATABASE_URL, get_engine, get_local_session

from planner.log import get_logger

log = get_logger(__name__)


ENGINE = get_engine(SQLALCHEMY_DATABASE_URL)
SessionLocal = sessionmaker(
    bind=ENGINE,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


def get_db() -> Generator:  # pragma: no cover
    """
    Returns a generator that yields a database session

    Yields:
        Session: A database session object.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_ctx_db(database_url: str) -> Generator:
    """
    Context manager that creates a database session and yields
    it for use in a 'with' statement.

    Parameters:
        database_url (str): The URL of the database to connect to.

    Yields:
        Generator: A database session.
    """
    db = get_local_session(database_url)()
    try:
        yield db
    except Exception as e:
        log.error("An error occurred while using the database session. Error: %s", e)
        db.rollback()
        raise
    finally:
        db.close()
