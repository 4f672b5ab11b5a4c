"""
Main FastAPI application entry point for the aIgrOT uplink relay.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from app.api.router import api_router
from app.core.config import settings
from app.core.events import lifespan
from app.core.exceptions import AigrotException
from app.utils.error_handling import error_response, from_http_exception

# Setup logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("aigrot")

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description=settings.PROJECT_DESCRIPTION,
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=None,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
)


# Register exception handlers
@app.exception_handler(AigrotException)
async def aigrot_exception_handler(request: Request, exc: AigrotException) -> JSONResponse:
    """Report application errors as ``{"error": ...}``."""
    return error_response(exc)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Framework errors (404, 405) in the same shape as application errors."""
    return error_response(from_http_exception(exc) or exc)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log the traceback, answer with a generic 500."""
    return error_response(exc)


# Register routers
app.include_router(api_router, prefix=settings.API_PREFIX)


# Root endpoint
@app.get("/", tags=["Health"])
async def root():
    """Root endpoint for health checks."""
    return {
        "status": "ok",
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
    }


if __name__ == "__main__":
    # For debugging only - use uvicorn for production
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
