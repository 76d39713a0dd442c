# /app/main.py

# --- Core Imports ---
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import get_settings

# --- Application-specific Router Imports ---
from .routers import (
    users_router,
    subjects_router,
    classes_router,
    assignments_router,
    settings_router,
    dashboard_router,
    security_router,
)

# --- Logging Configuration ---
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="School Admin API",
    description="Administrative back-office for users, subjects, classes and class-subject assignments.",
    version="1.0.0",
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- API Router Inclusion ---
app.include_router(dashboard_router.router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(users_router.router, prefix="/api/users", tags=["Users"])
app.include_router(subjects_router.router, prefix="/api/subjects", tags=["Subjects"])
app.include_router(classes_router.router, prefix="/api/classes", tags=["Classes"])
app.include_router(assignments_router.router, prefix="/api/assignments", tags=["Class-Subject Assignments"])
app.include_router(settings_router.router, prefix="/api/settings", tags=["System Settings"])
app.include_router(security_router.router, prefix="/api/security", tags=["Security"])

# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "School Admin API is running!", "version": app.version}
