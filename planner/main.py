from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from planner.config import settings
from planner.database import get_db
from planner.exceptions import AppError, register_exception_handlers
from planner.log import get_logger
from planner.router import (
    auth_router,
    habits_router,
    tasks_router,
)

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("=" * 50)
    log.info("%s - server started", settings.PROJECT_NAME)
    log.info("Environment: %s", settings.ENV)
    log.info("Version: %s", settings.API_VERSION)
    log.info("=" * 50)
    yield
    log.info("%s - server stopped", settings.PROJECT_NAME)


app = FastAPI(
    lifespan=lifespan,
    title=settings.PROJECT_NAME,
    version=settings.API_VERSION
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=list({settings.FRONTEND_URL, "http://localhost:3000"}),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
app.include_router(habits_router, prefix="/api/habits", tags=["Habits"])
app.include_router(tasks_router, prefix="/api/tasks", tags=["Tasks"])


#####################
### Root Endpoint ###
#####################
@app.get("/")
def read_root():
    return {"message": f"Bienvenido a la API del {settings.PROJECT_NAME}", "environment": settings.ENV, "version": settings.API_VERSION}


@app.get("/api/health", status_code=status.HTTP_200_OK)
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        log.error("Database health check failed: %s", e)
        raise AppError("Base de datos no disponible", status.HTTP_503_SERVICE_UNAVAILABLE) from e
    return {"status": "ok", "database": "ok"}
