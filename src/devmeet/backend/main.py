"""FastAPI application entry point"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from .config import settings
from .database import create_db_and_tables, async_session_maker
from .api import (
    auth_router,
    profile_router,
    feed_router,
    match_router,
    request_router,
    websocket_router,
    alumni_router,
)
from .exceptions import DevMeetException, ValidationError
from .services import PendingSignupReaper
from .utils.email import EmailService
from .websocket import RoomRouter
from .logger import setup_logger, get_logger

# Setup root logger
setup_logger("devmeet", settings.logging_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management"""
    # Startup: Create database tables
    logger.info("Initializing database...")
    try:
        create_db_and_tables()
        logger.info("Database initialization complete")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    # Startup: Evict expired pending signups in the background
    logger.info("Starting pending signup reaper...")
    reaper = PendingSignupReaper(
        async_session_maker, settings.pending_reap_interval_seconds
    )
    reaper.start()
    app.state.reaper = reaper

    if not app.state.notifier.is_configured:
        logger.warning(
            "SMTP is not configured; passcodes will "
            + ("fail to send" if settings.is_production else "be returned inline")
        )

    yield

    # Shutdown: Drop chat rooms
    logger.info("Clearing chat rooms...")
    await app.state.room_router.disconnect_all()

    # Shutdown: Stop reaper
    logger.info("Stopping pending signup reaper...")
    await reaper.stop()

    logger.info("Application shutting down")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="DevMeet - connect developers who can teach each other",
    lifespan=lifespan,
)

# Collaborators owned by the application
app.state.notifier = EmailService()
app.state.room_router = RoomRouter()

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handlers
@app.exception_handler(DevMeetException)
async def devmeet_exception_handler(
    request: Request,
    exc: DevMeetException,
):
    """Handle custom exceptions"""
    logger.warning(
        f"{type(exc).__name__}: {exc.message} (status: {exc.status_code})"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
):
    """Report malformed bodies with the same envelope as domain errors"""
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:])}: {error['msg']}"
        for error in errors
    ) or "Validation failed"
    logger.warning(f"Request validation failed: {message}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": message, "code": ValidationError.code},
    )


# Register routers
app.include_router(auth_router, prefix="/api")
app.include_router(profile_router, prefix="/api")
app.include_router(feed_router, prefix="/api")
app.include_router(match_router, prefix="/api")
app.include_router(request_router, prefix="/api")
app.include_router(alumni_router, prefix="/api")
app.include_router(websocket_router, prefix="/api", tags=["WebSocket"])


# Health check
@app.get("/health", tags=["System"])
def health_check():
    """Health check endpoint"""
    return {"status": "ok", "version": settings.app_version}


# Root path
@app.get("/", tags=["System"])
def root():
    """Root endpoint"""
    return {
        "message": "Welcome to DevMeet API",
        "version": settings.app_version,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    logger.info(
        f"Starting DevMeet API server (debug={settings.debug})..."
    )
    uvicorn.run(
        "devmeet.backend.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
    )
