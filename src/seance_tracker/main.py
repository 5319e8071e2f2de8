"""FastAPI application for the Seance Tracker."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import get_settings
from .api.deps import get_goal_repository, get_session_repository, get_user_repository
from .api.exception_handlers import register_exception_handlers
from .api.middleware.rate_limit import limiter
from .api.routes import auth, goals, seances, statistics
from .utils.log_sanitizer import install_log_sanitizer

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
# Installed before any request is logged
install_log_sanitizer()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting Seance Tracker v{__version__}")
    logger.info(f"Database: {settings.database_path}")
    if settings.uses_insecure_secret:
        logger.warning("JWT_SECRET_KEY is the built-in default; set it before deploying")

    # Create the tables up front instead of on the first request
    get_user_repository()
    get_session_repository()
    get_goal_repository()

    yield

    logger.info("Shutting down Seance Tracker")


app = FastAPI(
    title="Seance Tracker API",
    description="Workout sessions, goals and training statistics",
    version=__version__,
    lifespan=lifespan,
    redirect_slashes=False,
)

# Rate limiting
app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=settings.cors_methods,
    allow_headers=settings.cors_headers,
)

register_exception_handlers(app)

app.include_router(auth.router, prefix="/api/v1")
app.include_router(seances.router, prefix="/api/v1")
app.include_router(goals.router, prefix="/api/v1")
app.include_router(statistics.router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Seance Tracker API",
        "version": __version__,
        "status": "healthy",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
