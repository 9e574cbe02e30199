"""Main FastAPI application for Learner Analytics Service."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
import structlog
from prometheus_fastapi_instrumentator import Instrumentator

from app.core.config import settings
from app.core.logging import setup_logging
from app.core.database import init_db, get_db
from app.core.exceptions import StoreQueryError
from app.routers import analytics, goals, insights

# Setup structured logging
setup_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle manager."""
    logger.info("Starting Learner Analytics Service", version=settings.APP_VERSION)

    await init_db()

    logger.info("Analytics service initialized successfully")

    yield

    logger.info("Shutting down Learner Analytics Service")


# Create FastAPI app
app = FastAPI(
    title="Learner Analytics Service",
    description="Activity, session, mastery and persona analytics for learners",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Prometheus metrics
if settings.ENABLE_METRICS:
    Instrumentator().instrument(app).expose(app, endpoint="/metrics")

# Include routers
app.include_router(analytics.router, prefix="/api/analytics", tags=["analytics"])
app.include_router(goals.router, prefix="/api/goals", tags=["goals"])
app.include_router(insights.router, prefix="/api/insights", tags=["insights"])


@app.exception_handler(StoreQueryError)
async def store_query_error_handler(request: Request, exc: StoreQueryError):
    """Report store outages as unavailable metrics rather than partial data."""
    logger.error(
        "Metrics unavailable",
        path=request.url.path,
        operation=exc.operation,
        error=str(exc),
    )
    return JSONResponse(status_code=503, content={"detail": "metrics unavailable"})


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "service": "Learner Analytics Service",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "status": "operational"
    }


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint."""
    health_status = {
        "status": "healthy",
        "service": settings.SERVICE_NAME,
        "version": settings.APP_VERSION,
        "checks": {}
    }

    try:
        async for db in get_db():
            await db.execute(text("SELECT 1"))
            health_status["checks"]["database"] = "healthy"
    except Exception as e:
        health_status["checks"]["database"] = f"unhealthy: {str(e)}"
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JSONResponse(content=health_status, status_code=status_code)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.SERVICE_PORT,
        reload=settings.ENVIRONMENT == "development",
        log_config=None  # Use structlog instead
    )
