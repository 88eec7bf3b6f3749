"""
Main FastAPI application entry point.
Configures the application, middleware, and includes routers.
"""
from dotenv import load_dotenv

# Load environment variables from .env file first
load_dotenv()

from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from .auth.router import router as auth_router
from .auth.tokens import TokenIssuer, TokenSettings
from .database import Base, engine
from .config import settings
# Import all models so create_all sees every table
from .auth import models as auth_models  # noqa: F401
from .patients import models as patient_models  # noqa: F401
from .clinicians import models as clinician_models  # noqa: F401
from .exceptions import register_exception_handlers
from .core.middleware import setup_middlewares

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# Create database tables if they don't exist
Base.metadata.create_all(bind=engine)

logger.info("Starting WoundIQ API...")

# Create FastAPI application
app = FastAPI(
    title="WoundIQ API",
    description="API for clinical wound-assessment tracking",
    version="1.0.0"
)

# Signing key is fixed for the life of the process
app.state.token_issuer = TokenIssuer(TokenSettings.from_settings(settings))

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
app.include_router(auth_router, prefix="/api/v1")

# Root endpoint
@app.get("/")
def root():
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API version
    """
    return {"message": "Welcome to WoundIQ API", "version": app.version}

# Health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns:
        dict: Health status information
    """
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}
