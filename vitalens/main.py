"""
Vitalens EMR API application.

Builds the FastAPI app, opens the record store at startup and mounts the
domain routers under /api/v1.
"""
from dotenv import load_dotenv

# Load environment variables from .env file first
load_dotenv()

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .exceptions import register_exception_handlers
from .core.middleware import setup_middlewares
from .storage import init_storage
from .records.store import RecordStore
from .auth.router import router as auth_router
from .patients.router import router as patients_router
from .appointments.router import router as appointments_router
from .prescriptions.router import router as prescriptions_router
from .analyses.router import router as analyses_router
from .ai.router import router as ai_router
from .reports.router import router as reports_router

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Open storage and build the record store once at startup.
    """
    logger.info("Starting Vitalens EMR API...")
    if getattr(app.state, "record_store", None) is None:
        app.state.record_store = RecordStore(init_storage(settings), settings.storage_keys)
    yield


# Create FastAPI application
app = FastAPI(
    title="Vitalens EMR API",
    description="Patient records, scheduling, prescriptions and AI-assisted image analysis",
    version="1.0.0",
    lifespan=lifespan,
)

# Register exception handlers
register_exception_handlers(app)

# Configure CORS middleware
origins = [
    settings.frontend_url,
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware
setup_middlewares(app)

# Include routers
app.include_router(auth_router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(patients_router, prefix="/api/v1/patients", tags=["Patients"])
app.include_router(appointments_router, prefix="/api/v1/appointments", tags=["Appointments"])
app.include_router(prescriptions_router, prefix="/api/v1/prescriptions", tags=["Prescriptions"])
app.include_router(analyses_router, prefix="/api/v1/analyses", tags=["Analyses"])
app.include_router(ai_router, prefix="/api/v1/ai", tags=["AI Analysis"])
app.include_router(reports_router, prefix="/api/v1/reports", tags=["Reports"])

# Root endpoint
@app.get("/")
def root():
    """
    Service banner.

    Returns:
        dict: Welcome message and API version
    """
    return {"message": "Welcome to Vitalens EMR API", "version": app.version}

# Health check endpoint
@app.get("/health")
async def health_check(request: Request):
    """
    Liveness probe that also reports whether persistent storage is reachable.

    Returns:
        dict: Health status information
    """
    store = getattr(request.app.state, "record_store", None)
    available = bool(store and store.storage.is_available())
    return {"status": "healthy", "storage": "available" if available else "unavailable"}
