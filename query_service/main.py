from contextlib import asynccontextmanager
from dotenv import load_dotenv
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from query_service.ai.service import AiAnalyzerClient
from query_service.api.routers.routers import api_router
from query_service.core.config import settings
from query_service.core.logging_config import configure_logging
from query_service.middleware import RequestIDMiddleware
from query_service.search.service import QuickwitClient


# Load environment variables
load_dotenv()

# Route stdlib logging through loguru with request_id support
configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the shared backend clients on startup and close their connection
    pools on shutdown.
    """
    logger.info("Starting query service...")

    app.state.quickwit = QuickwitClient.from_settings()
    app.state.ai_analyzer = AiAnalyzerClient.from_settings()
    logger.info(
        f"Quickwit client ready: {settings.QUICKWIT_URL} index={settings.QUICKWIT_INDEX_ID}"
    )
    logger.info(
        f"AI analyzer ready: {settings.AI_ANALYZER_BASE_URL} model={settings.AI_ANALYZER_MODEL}"
    )

    try:
        yield
    finally:
        logger.info("Shutting down query service...")
        try:
            await app.state.quickwit.aclose()
            await app.state.ai_analyzer.aclose()
            logger.info("HTTP clients closed")
        except Exception:
            logger.exception("Error during shutdown")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    lifespan=lifespan,
    openapi_url="/openapi.json" if settings.is_local else None,
)

# Request ID middleware first so every log line carries the id
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Include all API routes
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
