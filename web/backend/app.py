#!/usr/bin/env python3
"""
ClearCause Notification Mailer - FastAPI Application

Receives database webhooks for new notification rows and emails them.

Usage:
    python main.py serve

Then point the notifications insert webhook at:
    - http://localhost:8080/functions/v1/send-email
    - http://localhost:8080/docs - API Documentation (Swagger UI)
"""

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from database.database import Database
from notification import EmailChannel, build_email_channel
from .config import AppConfig, get_config
from .exceptions import http_exception_handler, general_exception_handler
from .models.responses import HealthResponse
from .routers import notifications_router, CORS_ALLOW_HEADERS

logger = logging.getLogger(__name__)

SERVICE_NAME = "clearcause-mailer"


def create_app(
    config: Optional[AppConfig] = None,
    database: Optional[Database] = None,
    email_channel: Optional[EmailChannel] = None
) -> FastAPI:
    """
    Build the application and its long-lived collaborators.

    Args:
        config: Application configuration (defaults to get_config())
        database: Database to use instead of one built from config.database
        email_channel: Delivery channel to use instead of build_email_channel()
    """
    config = config or get_config()

    app = FastAPI(
        title="ClearCause Notification Mailer",
        description="Emails newly created notifications according to user preferences",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.state.config = config
    app.state.database = database or Database(config.database.url)
    app.state.email_channel = email_channel or build_email_channel(config.email)

    # Webhooks may also be invoked from the browser during development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=CORS_ALLOW_HEADERS,
    )

    # Register exception handlers
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(notifications_router)

    @app.get("/health", response_model=HealthResponse)
    def health_check():
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            service=SERVICE_NAME,
            delivery_mode=app.state.email_channel.mode
        )

    logger.info(f"Notification mailer ready (delivery mode: {app.state.email_channel.mode})")
    return app
