"""
Calendar Metadata API - Main Application
FastAPI application that derives billing/treatment metadata from clinic
calendar entries

Run with: python main.py
Access API docs at: http://localhost:8000/docs
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from api.routes import router, parser
from api.models import HealthResponse
from utils import setup_logging

# Create FastAPI app
app = FastAPI(
    title="Calendar Metadata API",
    description="Classify clinic calendar entries and extract billing amounts",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router, prefix="/api/v1")


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Calendar Metadata API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    return HealthResponse()


if __name__ == "__main__":
    import uvicorn

    log_config = parser.config.get("logging", {})
    setup_logging(
        log_file=log_config.get("file", "logs/calendar_parser.log"),
        level=log_config.get("level", "INFO"),
    )

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
