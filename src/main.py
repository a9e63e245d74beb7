"""
Exegesis Study API

FastAPI backend that turns a Bible reference or book name into a structured study.
"""

import time
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables (GOOGLE_API_KEY, GEMINI_MODEL, ...)
load_dotenv()

from exegesis.utils.logger import setup_logging, get_logger
from exegesis.controller.study_controller import router as study_router

# Initialize structured logging
setup_logging()
logger = get_logger(__name__)

# Track startup time for uptime calculation
_startup_time = time.time()
_app_version = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    logger.info(
        f"Starting Exegesis Study API v{_app_version}",
        extra={"event": "startup"},
    )

    yield

    logger.info("Shutting down", extra={"event": "shutdown"})


app = FastAPI(
    title="Exegesis Study API",
    description="Structured Bible study generation (passage exegesis and book introductions).",
    version=_app_version,
    lifespan=lifespan,
)

# CORS Middleware (allow the web frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict to your frontend URL
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(study_router)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint."""
    return {"status": "ok", "message": "Exegesis Study API is running"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Uptime and version for external monitoring."""
    from datetime import datetime, timezone

    return {
        "status": "healthy",
        "version": _app_version,
        "uptime_seconds": int(time.time() - _startup_time),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
