"""
Main entry point of the SchoolRaise application.
Start with: uvicorn schoolraise.main:app --reload (from backend/)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import schoolraise.models  # noqa: F401 (registers every model in Base.metadata before the routers)
from schoolraise.routers import admin, auth, fundraisers, notifications, pages, school, schools, student
from schoolraise.scheduler import start_scheduler, stop_scheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: starts and stops the APScheduler jobs."""
    start_scheduler()
    yield
    stop_scheduler()


app = FastAPI(
    title="SchoolRaise API",
    description="School fundraiser management: schools, students, fundraisers and ticket sales",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS for a separate front-end on localhost during development; cookies require credentials.
app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Accept"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Every unhandled error becomes a generic 500 that still goes through CORSMiddleware."""
    logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


@app.get("/api/health", tags=["Health"])
def health_check():
    """Checks that the API is up."""
    return {"status": "ok", "service": "SchoolRaise API", "version": "0.1.0"}


app.include_router(auth.router)
app.include_router(schools.router)
app.include_router(admin.router)
app.include_router(school.router)
app.include_router(student.router)
app.include_router(fundraisers.router)
app.include_router(notifications.router)
# Pages last: its catch-all GET route must not shadow the API.
app.include_router(pages.router)
