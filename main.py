from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from core.logging_config import setup_logging

# Feature routes
from features.forecast.routes.forecast_routes import router as forecast_router

# Services and clients
from features.forecast.services.windfinder_client import WindfinderClient
from features.forecast.services.forecast_service import ForecastService
from features.forecast.services.forecast_store import ForecastStore
from features.forecast.services.refresh_service import ForecastRefresher

setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("🚀 Starting Spot Forecast API...")

    client = WindfinderClient()
    store = ForecastStore()
    refresher = ForecastRefresher(ForecastService(client), store)

    app.state.windfinder_client = client
    app.state.forecast_store = store
    app.state.forecast_refresher = refresher

    try:
        # First scrape runs right away on the scheduler, requests get 404 until it lands
        refresher.start()
        logger.info("✨ API startup complete - ready to serve requests")
        yield
    finally:
        logger.info("🔄 Shutting down API...")
        await refresher.stop()
        await client.close()
        logger.info("👋 API shutdown complete")

app = FastAPI(
    title="Spot Forecast API",
    description="Wind and wave forecast for a Windfinder spot",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include feature routers
app.include_router(forecast_router)

@app.get("/health")
async def health_check(request: Request):
    """Health check endpoint"""
    refresher = request.app.state.forecast_refresher
    next_run = refresher.next_run_time()
    return {
        "status": "healthy",
        "time": datetime.now(timezone.utc).isoformat(),
        "forecast_loaded": refresher.store.is_populated,
        "last_refresh": refresher.last_success.isoformat() if refresher.last_success else None,
        "next_refresh": next_run.isoformat() if next_run else None,
        "last_error": refresher.last_error
    }

if __name__ == "__main__":
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 5010))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level="info",
        workers=1
    )
