"""FastAPI application exposing the correlation insights engine."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import settings
from sales_brain.action.routers.correlations import router as correlations_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

app = FastAPI(title="Sales Brain Insights API", version=API_VERSION)

app.include_router(correlations_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValueError)
async def _bad_input_handler(request: Request, exc: ValueError):
    """Caller input errors (unknown scope, preset or filter) become 400s."""
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"error": str(exc), "status": "failed"})


@app.exception_handler(Exception)
async def _global_error_handler(request: Request, exc: Exception):
    """Catch-all: ensure every unhandled error returns JSON, not raw HTML."""
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={
            "detail": f"Server error: {exc}",
            "error": str(exc),
            "status": "failed",
        },
    )


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "version": API_VERSION}
