"""
Spot-the-Difference API - Main Application
FastAPI application that flattens a photographed two-panel picture and
returns its left and right halves for comparison

Run with: python main.py
Access API docs at: http://localhost:8000/docs
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from api.models import HealthResponse
from api.routes import router
from utils import load_config, setup_logging

_logging_config = load_config(section='logging') or {}
setup_logging(
    log_file=_logging_config.get('file', 'logs/spotdiff.log'),
    level=_logging_config.get('level', 'INFO')
)

# Create FastAPI app
app = FastAPI(
    title="Spot-the-Difference API",
    description="Detect, rectify, equalize and split two-panel picture photos",
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
    """Service info"""
    return {
        "message": "Spot-the-Difference API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }

@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    return HealthResponse()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
