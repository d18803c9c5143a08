"""
People Compliance API
FastAPI surface over the compliance status aggregation engine. Record
collections are posted in; the derived view and KPIs come back out.
"""
import logging
import time
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import config
from app.services.logging_config import setup_logging
from app.services.middleware import RequestTimingMiddleware
from app.services.perf_monitor import tracker as perf_tracker
from app.api.compliance_routes import router as compliance_router

setup_logging(level=config.LOG_LEVEL, json_output=config.LOG_FORMAT != "text")
logger = logging.getLogger("people-compliance.api")

# Record process start time for uptime calculation
_PROCESS_START = time.monotonic()

app = FastAPI(
    title=config.APP_NAME,
    version=config.APP_VERSION,
    description="Employee compliance scoring: right to work, DBS, training, documents, probation",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Requested-With", "X-Request-ID"],
)
# Request timing + X-Request-ID must be outermost so it wraps all other middleware
app.add_middleware(RequestTimingMiddleware)

app.include_router(compliance_router)


@app.get("/health")
async def health_check():
    return {
        "status": "active",
        "version": config.APP_VERSION,
    }


@app.get("/metrics")
async def metrics():
    """In-process evaluation counters from the PerformanceTracker singleton."""
    snapshot = perf_tracker.get_metrics()
    return {
        "uptime_seconds": round(time.monotonic() - _PROCESS_START, 1),
        **snapshot,
    }
