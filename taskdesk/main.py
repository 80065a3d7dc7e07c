import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from taskdesk.core.config import settings
from taskdesk.core.exceptions import (
    TaskDeskError,
    ResourceNotFoundError,
    ResourceConflictError,
    ValidationError,
)
from taskdesk.database import engine, Base, session_scope
from taskdesk.api.v1 import auth, users, projects, teams, tasks, reports
from taskdesk.services.roles import RoleService

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("taskdesk")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema and reference data on startup."""
    logger.info("Starting %s (%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
    Base.metadata.create_all(bind=engine)
    with session_scope() as db:
        RoleService(db).seed_defaults()
    yield
    logger.info("Shutting down %s", settings.PROJECT_NAME)


# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.DESCRIPTION,
    openapi_url="/api/v1/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

# Set up CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/api/v1/users", tags=["Users"])
app.include_router(projects.router, prefix="/api/v1/projects", tags=["Projects"])
app.include_router(teams.router, prefix="/api/v1/teams", tags=["Teams"])
app.include_router(tasks.router, prefix="/api/v1/tasks", tags=["Tasks"])
app.include_router(reports.router, prefix="/api/v1/reports", tags=["Reports"])


_ERROR_STATUS = {
    ResourceNotFoundError: 404,
    ResourceConflictError: 409,
    ValidationError: 400,
}


@app.exception_handler(TaskDeskError)
async def taskdesk_exception_handler(request: Request, exc: TaskDeskError):
    status_code = _ERROR_STATUS.get(type(exc), 400)
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    if isinstance(exc, IntegrityError):
        return JSONResponse(status_code=409, content={"detail": "Conflicting or missing related data"})
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=503, content={"detail": "Database unavailable"})


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": settings.VERSION,
        "docs": "/api/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.ENVIRONMENT}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "taskdesk.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
