"""
API Package
Contains FastAPI routes and models
"""

from api.routes import router
from api.models import (
    ParseResponse,
    BatchParseResponse,
    ClassificationsResponse,
    ReclassifyResponse,
    HealthResponse,
    ErrorResponse
)

__all__ = [
    'router',
    'ParseResponse',
    'BatchParseResponse',
    'ClassificationsResponse',
    'ReclassifyResponse',
    'HealthResponse',
    'ErrorResponse'
]
