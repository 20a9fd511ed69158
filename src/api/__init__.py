"""
API Package
Contains FastAPI routes and models
"""

from api.routes import router
from api.models import (
    PointModel,
    DetectResponse,
    ProcessResponse,
    HealthResponse,
    ErrorResponse
)

__all__ = [
    'router',
    'PointModel',
    'DetectResponse',
    'ProcessResponse',
    'HealthResponse',
    'ErrorResponse'
]
