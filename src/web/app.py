"""FastAPI application entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cli.logging_config import setup_logging
from journal.gamification import GamificationStore
from journal.store import JournalStore
from observability import log_run_summary
from web.deps import get_config
from web.routes import chat, dashboard, gamification, insights, journal, map_data, weather
from web.user_store import init_db, set_db_path

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_config()
    setup_logging(json_mode=True, level=config.logging.level, log_file=config.paths.log_file)
    set_db_path(config.paths.users_db)
    init_db()
    JournalStore(config.paths.journal_db)
    GamificationStore(config.paths.journal_db)
    logger.info("web.startup", journal_db=str(config.paths.journal_db))
    yield
    log_run_summary("web.metrics")
    logger.info("web.shutdown")


app = FastAPI(
    title="EcoJournal",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS: allow frontend origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=[get_config().web.frontend_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Every error body is ``{"error": message}``."""
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logger.info("web.invalid_request", path=request.url.path, error=message)
    return JSONResponse({"error": message}, status_code=400)


# Mount routes
app.include_router(dashboard.router)
app.include_router(map_data.router)
app.include_router(journal.router)
app.include_router(chat.router)
app.include_router(weather.router)
app.include_router(insights.router)
app.include_router(gamification.router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}
