"""
FastAPI application for the Assembly crawler.

Exposes HTTP triggers for the crawlers and their run history.

Responsibility: Main API application setup and configuration
"""

# Load .env BEFORE importing settings (critical for pydantic-settings)
from dotenv import load_dotenv
load_dotenv('.env')

from fastapi import FastAPI
from fastapi.responses import JSONResponse
import logging

from assembly_crawler.config import settings
from assembly_crawler.db.session import Database
from assembly_crawler.services.trigger import CrawlTrigger

# Configure logging
logging.basicConfig(
    level=settings.app.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=f"{settings.app.app_name} API",
    description="HTTP triggers for the National Assembly crawlers",
    version=settings.app.app_version,
    docs_url="/docs",
    redoc_url="/redoc"
)


@app.on_event("startup")
async def startup_event():
    """Open the database and the shared crawl trigger"""
    logger.info(f"Starting {settings.app.app_name} API...")
    logger.info(f"Environment: {settings.app.environment}")
    logger.info(f"Debug mode: {settings.app.debug}")

    database = Database()
    await database.initialize()

    app.state.database = database
    app.state.trigger = CrawlTrigger(database)


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info(f"Shutting down {settings.app.app_name} API...")

    database = getattr(app.state, "database", None)
    if database is not None:
        await database.close()


@app.get("/")
async def root():
    """Root endpoint - API information."""
    return {
        "name": f"{settings.app.app_name} API",
        "version": settings.app.app_version,
        "status": "operational",
        "endpoints": {
            "crawl_bills": "/api/v1/crawl/bills",
            "crawl_petitions": "/api/v1/crawl/petitions",
            "crawl_status": "/api/v1/crawl/status",
            "crawl_runs": "/api/v1/crawl/runs",
            "docs": "/docs",
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "service": "assembly-crawler-api"
    }


# Exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc) if settings.app.debug else "An unexpected error occurred"
        }
    )


# Import and include routers
from api.v1.endpoints import crawl

app.include_router(
    crawl.router,
    prefix="/api/v1",
    tags=["crawl"]
)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=settings.app.api_host,
        port=settings.app.api_port,
        reload=settings.app.debug
    )
