import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from skillstreak.core.config import settings, validate_config
from skillstreak.core.logging import configure_logging
from skillstreak.core.middleware.request_id import RequestIdMiddleware
from skillstreak.core.errors import (
    AppError,
    app_error_handler,
    http_error_handler,
    request_validation_handler,
    unhandled_exception_handler,
)
from skillstreak.api import courses, exercises, health, leaderboard, users

configure_logging(settings.ENV, settings.LOG_LEVEL)
validate_config(strict=settings.CONFIG_STRICT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("skillstreak")
    logger.info("Starting SkillStreak backend...")
    app.state.startup_time = time.time()
    try:
        yield
    finally:
        logging.getLogger("skillstreak").info("Stopping SkillStreak backend...")


app = FastAPI(title="SkillStreak - Backend", lifespan=lifespan)

# Middlewares
app.add_middleware(RequestIdMiddleware)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(StarletteHTTPException, http_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.CORS_ALLOWED_ORIGINS.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(exercises.router)
app.include_router(courses.router)
app.include_router(users.router)
app.include_router(leaderboard.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("skillstreak.main:app", host="0.0.0.0", port=8000, reload=settings.ENV == "development")
