from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from uniplan.api.routes import (
    health,
    lecturers,
    reports,
    schedule_entries,
    semesters,
    timetables,
)
from uniplan.core.config import get_settings
from uniplan.core.exceptions import AppError
from uniplan.core.logging import configure_logging
from uniplan.core.middleware import RequestLoggingMiddleware, RequestSizeLimitMiddleware
from uniplan.db.bootstrap import ensure_schema

settings = get_settings()


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging(settings)
    ensure_schema()
    yield


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "details": exc.details},
    )


app = FastAPI(title=settings.project_name, lifespan=lifespan)
app.add_exception_handler(AppError, app_error_handler)

app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_request_size_bytes)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
app.include_router(timetables.router, prefix=f"{settings.api_prefix}/timetables", tags=["timetables"])
app.include_router(
    schedule_entries.router,
    prefix=f"{settings.api_prefix}/timetables/{{timetable_id}}/entries",
    tags=["schedule-entries"],
)
app.include_router(lecturers.router, prefix=f"{settings.api_prefix}/lecturers", tags=["lecturers"])
app.include_router(semesters.router, prefix=f"{settings.api_prefix}/semesters", tags=["semesters"])
app.include_router(reports.router, prefix=f"{settings.api_prefix}/reports", tags=["reports"])
