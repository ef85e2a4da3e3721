# main.py
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from promo_engine import routers
from promo_engine.core.config import LOG_LEVEL
from promo_engine.core.db import init_models
from promo_engine.middleware.request_logger import RequestLoggerMiddleware

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("promo_engine")

app = FastAPI(
    title="Discount Service API",
    description="FastAPI backend for vouchers, promotions and order discounts",
    version="0.1.0"
)
# CORS setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # adjust for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggerMiddleware)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Health check endpoints
@app.get("/", tags=["Health"])
async def health_check():
    return {"status": "ok", "message": "Discount Service API is running", "documentation": "/docs"}


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


# Register routers
app.include_router(routers.router)


@app.on_event("startup")
async def on_startup():
    await init_models()
