"""
Pydantic models for API responses.
Auto-generates OpenAPI documentation.

Record and aggregate payloads reuse the domain models in models.py.
"""

from pydantic import BaseModel
from typing import Dict


class WelcomeResponse(BaseModel):
    """Root discovery payload."""
    message: str
    endpoints: Dict[str, str]


class StoreStatsResponse(BaseModel):
    """In-memory store statistics."""
    loaded: bool
    total_records: int
    total_years: int


class HealthResponse(BaseModel):
    """API health check response."""
    service: str
    version: str
    status: str
    data_path: str
    store_stats: StoreStatsResponse


class ErrorResponse(BaseModel):
    """Error response."""
    error: str
