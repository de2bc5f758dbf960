"""
Main FastAPI application for the Historical Legal Research Agent
"""

import logging
from contextlib import asynccontextmanager
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from api.query_endpoints import router as query_router, degraded_response
from core.config import LOGGING_CONFIG, get_corpus_config
from core.logging_config import AgentLogContext, setup_logging, setup_structured_logging
from corpus.store import CorpusStore
from monitoring.metrics import get_metrics
from rag.agent import LegalResearchAgent

# Setup logging
setup_logging(**LOGGING_CONFIG)
setup_structured_logging()
logger = logging.getLogger(__name__)

SERVICE_NAME = "Historical Legal Research Agent"
SERVICE_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info(f"Starting {SERVICE_NAME}...")

    # Corpus integrity errors are fatal: never serve traffic with a broken corpus
    with AgentLogContext(logger, "corpus load"):
        corpus = CorpusStore.from_file(get_corpus_config()['corpus_path'])
        app.state.agent = LegalResearchAgent(corpus)

    logger.info(f"Research agent ready with {len(corpus)} entries", extra={'corpus_size': len(corpus)})

    yield

    logger.info(f"Shutting down {SERVICE_NAME}...")


app = FastAPI(
    title=SERVICE_NAME,
    description="Keyword research agent for historical legal definitions, writs and doctrines",
    version=SERVICE_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(query_router)


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(f"Global exception: {exc}")
    if request.url.path.startswith("/api/query"):
        return degraded_response()
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": f"{SERVICE_NAME} API",
        "version": SERVICE_VERSION,
        "endpoints": {
            "query": "/api/query",
            "docs": "/docs",
            "health": "/health",
            "metrics": "/metrics"
        }
    }


@app.get("/health")
async def health_check():
    """Global health check endpoint"""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION
    }


@app.get("/metrics")
async def metrics():
    return await get_metrics()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
