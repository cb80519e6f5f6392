"""FastAPI application for the swap aggregator.

Note: Access control for administrative operations (route and partner
management, sweeps) is not exposed over HTTP. It is left to embedding code.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from aggregator import __version__
from aggregator.api.endpoints import router
from aggregator.errors import AggregatorError
from aggregator.log import configure_logging
from aggregator.models.responses import ErrorResponse

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("AGGREGATOR_HOST", "0.0.0.0")
PORT = int(os.environ.get("AGGREGATOR_PORT", "8000"))
DEBUG = os.environ.get("AGGREGATOR_DEBUG", "false").lower() in ("true", "1", "yes")

# HTTP status per error kind; anything unlisted is a client error
ERROR_STATUS = {
    "InvalidRouteIndex": 404,
    "EmptyRouteSet": 422,
    "RouteCountMismatch": 422,
    "InvalidAmount": 422,
    "InvalidDestination": 422,
    "SlippageExceeded": 409,
    "ReentrantCall": 409,
    "CostBudgetExceeded": 429,
    "RouteQuoteFailure": 502,
    "CustodyImbalance": 500,
}
DEFAULT_ERROR_STATUS = 400

configure_logging(os.environ.get("AGGREGATOR_LOG_LEVEL", "DEBUG" if DEBUG else "INFO"))

logger = structlog.get_logger()

app = FastAPI(
    title="Swap Aggregator",
    description="Routes swaps across multiple liquidity venues with partner fees",
    version=__version__,
)


@app.exception_handler(AggregatorError)
async def aggregator_error_handler(request: Request, exc: AggregatorError) -> JSONResponse:
    """Render aggregator errors as {"error": kind, "detail": message}."""
    status_code = ERROR_STATUS.get(exc.kind, DEFAULT_ERROR_STATUS)
    logger.warning(
        "request_failed",
        path=request.url.path,
        error=exc.kind,
        detail=str(exc),
        status_code=status_code,
    )
    body = ErrorResponse(error=exc.kind, detail=str(exc))
    return JSONResponse(status_code=status_code, content=body.model_dump())


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the aggregator API server.

    Configuration via environment variables:
    - AGGREGATOR_HOST: Host to bind to (default: 0.0.0.0)
    - AGGREGATOR_PORT: Port to bind to (default: 8000)
    - AGGREGATOR_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "aggregator.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
