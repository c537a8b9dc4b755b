"""Main application entry point for the InputFilter service.

This module initializes the FastAPI application and exposes the filter over
HTTP. The active policy (see `inputfilter.app.policy`) decides which tags and
attributes survive sanitization and whether the service is enabled at all.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, status

from inputfilter.app.config import FilterRequest, PayloadRequest, settings
import inputfilter.engines.instances as services

# Setup Logger
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("inputfilter.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Builds the filter engine on startup."""
    logger.info("🚀 InputFilter starting up...")
    services.initialize_services()

    yield

    logger.info("🛑 InputFilter shutting down...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    lifespan=lifespan
)


def get_filter():
    """Returns the active filter or rejects the request if it is disabled."""
    if services.filter_service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Filtering is disabled by policy.",
        )
    return services.filter_service


@app.get("/health")
async def health_check():
    """Returns the operational status of the service."""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc)}


@app.post("/filter")
async def filter_value(request: FilterRequest):
    """Cleans a single value with the requested filter type.

    Args:
        request (FilterRequest): The value and the filter type name.

    Returns:
        dict: The filter type used and the cleaned value.
    """
    input_filter = get_filter()

    try:
        cleaned = input_filter.clean(request.value, request.type)
    except Exception as e:
        logger.error(f"❌ Internal Filtering Error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal processing failed.",
        )

    return {"status": "success", "type": request.type.lower(), "value": cleaned}


@app.post("/filter/payload")
async def filter_payload(request: PayloadRequest):
    """Cleans the string fields of a JSON object.

    Only the keys listed in `fields` are cleaned when it is given.

    Args:
        request (PayloadRequest): The payload and filtering options.

    Returns:
        dict: The cleaned payload.
    """
    input_filter = get_filter()

    try:
        cleaned = input_filter.clean_payload(request.payload, request.type, request.fields)
    except Exception as e:
        logger.error(f"❌ Internal Filtering Error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal processing failed.",
        )

    return {"status": "success", "payload": cleaned}
