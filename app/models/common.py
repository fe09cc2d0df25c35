"""
Common Pydantic models for the Visa Circle API
"""
from pydantic import BaseModel
from datetime import datetime


class HealthResponse(BaseModel):
    """
    Health check response model
    """
    status: str
    message: str
    timestamp: datetime
    version: str


class ErrorResponse(BaseModel):
    """
    Error body returned by the webhook endpoint
    """
    error: str
