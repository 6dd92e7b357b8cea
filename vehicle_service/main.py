"""
Main FastAPI application entry point.
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from pymongo.database import Database
from pymongo.errors import PyMongoError

from vehicle_service.config import get_settings
from vehicle_service.database import close_db, get_db, init_db
from vehicle_service.errors import register_exception_handlers
from vehicle_service.log_utils import setup_logging
from vehicle_service.uploads import URL_PREFIX, resolve_upload
from vehicle_service.routers import (
    auth, chatbot, dashboard, emergency, inventory, users, vehicle_errors, vehicle_registration,
)

settings = get_settings()
logger = logging.getLogger("vehicle_service.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan events for the application.
    Handles startup and shutdown events.
    """
    # Startup
    setup_logging(settings.log_level)
    logger.info("Starting %s %s", settings.app_name, settings.app_version)
    os.makedirs(settings.upload_dir, exist_ok=True)
    logger.info("Initializing database %s", settings.mongodb_db)
    init_db()
    logger.info("Database initialized successfully")
    logger.info("API available at: %s", settings.api_prefix)

    yield

    # Shutdown
    close_db()
    logger.info("Shutting down %s", settings.app_name)


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    ## Vehicle Service Management API

    Backend for roadside emergencies, spare-parts inventory and vehicle registration.

    ### Entities:
    * **Emergency requests**: roadside incidents with location and photos
    * **Inventory**: spare-parts catalogue
    * **Vehicle registrations**: owner and vehicle pairings awaiting approval
    * **Vehicle errors**: fault reports with photos
    * **Users**: authentication and admin/user roles
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(users.router, prefix=settings.api_prefix)
app.include_router(emergency.router, prefix=settings.api_prefix)
app.include_router(inventory.router, prefix=settings.api_prefix)
app.include_router(vehicle_registration.router, prefix=settings.api_prefix)
app.include_router(vehicle_errors.router, prefix=settings.api_prefix)
app.include_router(chatbot.router, prefix=settings.api_prefix)
app.include_router(dashboard.router, prefix=settings.api_prefix)


@app.get(f"/{URL_PREFIX}/{{file_path:path}}", include_in_schema=False)
def get_upload(file_path: str):
    """Serve a stored upload from the configured upload directory."""
    target = resolve_upload(file_path)
    if target is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="File not found"
        )
    return FileResponse(target)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "message": "Welcome to the Vehicle Service Management API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health")
def health_check(db: Database = Depends(get_db)):
    """Health check endpoint."""
    try:
        db.command("ping")
        database = "connected"
    except PyMongoError as e:
        logger.error("Health check database ping failed: %s", e)
        database = "disconnected"
    return {
        "status": "healthy" if database == "connected" else "unhealthy",
        "database": database,
        "version": settings.app_version,
    }


def run():
    """Console entry point."""
    import uvicorn
    uvicorn.run(
        "vehicle_service.main:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 5000)),
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
