#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict


class SendEmailResponse(BaseModel):
    """Outcome of a delivery attempt."""
    model_config = ConfigDict(
        json_schema_extra={"example": {"success": True}}
    )

    success: bool


class ErrorResponse(BaseModel):
    """Unexpected failure while processing a webhook."""
    error: str


class HealthResponse(BaseModel):
    """Health check with the active delivery mode."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "service": "clearcause-mailer",
                "delivery_mode": "simulated"
            }
        }
    )

    status: str
    service: str
    delivery_mode: str
