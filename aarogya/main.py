"""
Main FastAPI application entry point.
Configures the application, middleware, and includes routers.
"""
from dotenv import load_dotenv

# Load environment variables from .env file first
load_dotenv()

import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .database import SessionLocal, engine
from .models import Base  # noqa: F401  registers every model on Base
from .exceptions import register_exception_handlers
from .auth.router import router as auth_router
from .auth.dependencies import require_admin
from .admin.router import router as admin_router
from .patients.router import router as patients_router
from .core.middleware import setup_middlewares
from .core.bootstrap import bootstrap_admin_if_needed

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create database tables if they don't exist
Base.metadata.create_all(bind=engine)

# Bootstrap admin creation
logger.info("Starting Aarogya diagnostics portal API...")
try:
    db = SessionLocal()
    try:
        bootstrap_admin_if_needed(db)
    finally:
        db.close()
except Exception as e:
    logger.error(f"Bootstrap process failed: {str(e)}")

# Create FastAPI application
app = FastAPI(
    title="Aarogya Diagnostics Portal API",
    description="Accounts, approvals and role-scoped access for patients, doctors, labs and admins",
    version="1.0.0",
)

# Register exception handlers
register_exception_handlers(app)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware
setup_middlewares(app)

# Include routers
app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
app.include_router(
    admin_router,
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)
app.include_router(patients_router, prefix="/api/patients", tags=["Patients"])


# Root endpoint
@app.get("/")
def root():
    """
    Root endpoint for API health check.

    Returns:
        dict: Simple welcome message
    """
    return {"message": "Welcome to Aarogya API", "version": app.version}


# Health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns:
        dict: Health status information
    """
    return {"status": "healthy", "database": engine.dialect.name}
