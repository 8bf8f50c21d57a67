from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.api.api_v1.api import api_router
from app.api import tracking
from app.db.init_db import init_db
from app.core.monitoring import init_sentry
from app.core.logging_middleware import LoggingMiddleware
import logging

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="CreatorStays API",
    description="Marketplace connecting vacation-rental hosts with content creators",
    version="1.0.0",
    docs_url="/api/docs" if not settings.is_production else None,
    redoc_url="/api/redoc" if not settings.is_production else None,
)

# Initialize monitoring
init_sentry()

app.add_middleware(LoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_STR)
app.include_router(tracking.router)

@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting CreatorStays API in {settings.ENVIRONMENT or 'local'} environment")
    init_db()

@app.get("/")
async def root():
    return {
        "message": "CreatorStays API",
        "version": "1.0.0",
        "status": "Running",
        "environment": settings.ENVIRONMENT or "local",
    }

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
    }
