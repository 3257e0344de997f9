"""Storefront FastAPI application.

Serves the shopper, seller and admin APIs. Commands are processed
synchronously inside each request, wrapped in the storefront domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import os
import time
import uuid

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from pyproject.toml:
#   - unset / "test" → memory database, events processed in the request
#   - "production"   → PostgreSQL, events still processed in the request
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from storefront.domain import storefront
from storefront.utils.logging import add_context, clear_context, configure_logging, get_logger

configure_logging()
storefront.init()

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Saree Storefront API",
    description="Catalogue, cart, checkout, returns and the seller inventory dashboard",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("STOREFRONT_CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Invalidates", "X-Request-ID"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context and bind request details to the log context."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    add_context(request_id=request_id, method=request.method, path=request.url.path)
    started = time.perf_counter()
    try:
        with storefront.domain_context():
            response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Error handlers and routers
# ---------------------------------------------------------------------------
from storefront.api import ROUTERS  # noqa: E402
from storefront.api.errors import register_exception_handlers  # noqa: E402

register_exception_handlers(app)

for router in ROUTERS:
    app.include_router(router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
