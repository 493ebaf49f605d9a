"""
Safari Sync Server - Backend API
================================
FastAPI application that keeps the wildlife tracker's devices in sync.

ARCHITECTURE:
    Each device (phone/tablet in the field) records sightings offline and
    syncs them whenever it has a connection. The server keeps one merged
    copy of everything in memory and mirrors it to a JSON file.

    [Device A] --\
                  >--POST /sync--> [This Backend] --> [safari-data.json]
    [Device B] --/                      |
                                        v
                          [GET /export, GET /stats, GET /sightings]

    Conflicts are settled by last write wins on each sighting's timestamp.
    Deletions are tombstones (deleted=true) and sync like any other edit.

HOW TO RUN:
    # Install
    pip install -e .

    # Copy environment config
    cp env.example.txt .env
    # Edit .env with your settings (at least SAFARI_PASSWORD)

    # Run the server
    python -m safari_sync
    # or: uvicorn safari_sync.main:app --port 3000

API DOCUMENTATION:
    After starting the server, visit:
    - Swagger UI: http://localhost:3000/docs
    - ReDoc: http://localhost:3000/redoc

Author: Safari Tracker Team
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from safari_sync.config import Config
from safari_sync.models import HealthResponse
from safari_sync.routers import sightings_router, set_sync_service
from safari_sync.services import RecordStore, SyncService

logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    STARTUP:
        1. Load sightings from the data file
        2. Start the sync service and its autosave timer
        3. Inject the service into the routers

    SHUTDOWN:
        1. Save sightings one last time
        2. Stop the autosave timer
    """
    # ========== STARTUP ==========
    print("=" * 60)
    print("SAFARI SYNC SERVER - Starting Backend")
    print("=" * 60)

    store = RecordStore(Config.DATA_FILE)
    loaded = store.load()

    sync_service = SyncService(store, autosave_interval=Config.AUTOSAVE_INTERVAL)
    sync_service.start()

    set_sync_service(sync_service)

    print(f"Loaded {loaded} sightings from {Config.DATA_FILE}")
    print(f"   Autosave interval: {Config.AUTOSAVE_INTERVAL} seconds")
    print(f"   CORS origins: {', '.join(Config.CORS_ORIGINS)}")
    print()
    print("Endpoints:")
    print("   GET  /health     - Health check")
    print("   GET  /sightings  - Get all sightings")
    print("   POST /sync       - Sync sightings from device")
    print("   GET  /export     - Export as CSV")
    print("   GET  /stats      - Get statistics")
    print("=" * 60)

    yield  # Application runs here

    # ========== SHUTDOWN ==========
    print()
    print("Shutting down...")
    await sync_service.shutdown()
    set_sync_service(None)
    print("Shutdown complete")


# =============================================================================
# CREATE FASTAPI APPLICATION
# =============================================================================

app = FastAPI(
    title="Safari Sync API",
    description="""
## Overview

Keeps wildlife sightings in sync across offline-first devices.

## How It Works

1. **Record offline** - Devices log sightings locally with an id and timestamp
2. **Sync** - `POST /sync` with everything the device has
3. **Merge** - For each id the newest timestamp wins; deletions are tombstones
4. **Pull** - `GET /sightings` returns the merged set, deletions included

## Authentication

Every endpoint except `/health` needs the header `X-Password: <shared password>`.
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Password"],
)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies (bad JSON, wrong shape) are a plain 400."""
    logger.warning(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"detail": "Malformed request body"})


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unexpected: log it, don't leak it."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Server error"})


# =============================================================================
# INCLUDE ROUTERS
# =============================================================================

app.include_router(sightings_router)


# =============================================================================
# ROOT ENDPOINTS
# =============================================================================

@app.get(
    "/",
    summary="API Information",
    description="Get basic API information and available endpoints."
)
async def root():
    """Root endpoint with API overview."""
    return {
        "name": "Safari Sync API",
        "version": "1.0.0",
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc",
            "openapi": "/openapi.json"
        },
        "endpoints": {
            "health": "GET /health",
            "sightings": "GET /sightings",
            "sync": "POST /sync",
            "export": "GET /export",
            "stats": "GET /stats",
        }
    }


@app.get(
    "/health",
    summary="Health Check",
    description="Check if the backend is running. No password needed.",
    response_model=HealthResponse,
)
async def health():
    """Health check endpoint."""
    return HealthResponse(status="ok", time=datetime.now(timezone.utc))
