"""
FastAPI Application Entry Point

Integrates:
  - Web chat endpoint (browser widget)
  - Twilio WhatsApp webhook
  - Health checks
  - Middleware for logging & error handling

Run: uvicorn main:app --reload --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from agent.health import health_live, health_ready, initialize_health_checker
from config import Config
from infra import bootstrap_infrastructure
from transport.twilio import router as whatsapp_router
from transport.web import router as web_router

# Setup logging
logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    # Startup
    initialize_health_checker()
    infra = bootstrap_infrastructure()
    logger.info("=" * 60)
    logger.info("Relay gateway starting up...")
    logger.info(f"Environment: {Config.ENVIRONMENT}")
    logger.info(f"Backends: {infra!r}")
    if not Config.signature_verification_enabled():
        logger.warning("TWILIO_AUTH_TOKEN not set: webhook requests are UNVERIFIED")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("Relay gateway shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Relay Gateway API",
    description="Web chat and WhatsApp conversations through one pipeline",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict this in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware for logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests; convert anything unhandled into a generic 500."""
    logger.debug(f"{request.method} {request.url.path}")
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"Request error: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


# Include routers
app.include_router(web_router)
app.include_router(whatsapp_router)


# Health check endpoints
@app.get("/health/live")
async def live():
    """Liveness probe."""
    return await health_live()


@app.get("/health/ready")
async def ready():
    """Readiness probe."""
    result = await health_ready()
    status_code = 200 if result["status"] == "healthy" else 503
    return JSONResponse(content=result, status_code=status_code)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Relay Gateway API",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "web_chat": "POST /api/agent",
            "whatsapp_webhook": "POST /api/webhook/whatsapp",
            "whatsapp_status": "GET /api/webhook/whatsapp",
            "health_live": "GET /health/live",
            "health_ready": "GET /health/ready",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=Config.AGENT_PORT,
        reload=Config.ENVIRONMENT == "development",
    )
