#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.

The Database and EmailChannel are built once by create_app() and stored on
app.state; each request gets its own session and dispatcher.
"""

from typing import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from database.database import Database
from database.repositories import NotificationRepository
from notification import EmailChannel, NotificationDispatcher
from .config import AppConfig


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_email_channel(request: Request) -> EmailChannel:
    return request.app.state.email_channel


def get_db(database: Database = Depends(get_database)) -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Usage:
        @app.get("/endpoint")
        def my_endpoint(db: Session = Depends(get_db)):
            ...

    Yields:
        Session: Database session that will be automatically closed.
    """
    yield from database.get_session()


def get_dispatcher(
    db: Session = Depends(get_db),
    channel: EmailChannel = Depends(get_email_channel),
    config: AppConfig = Depends(get_app_config)
) -> NotificationDispatcher:
    """Dispatcher bound to the request's session."""
    return NotificationDispatcher(
        NotificationRepository(db),
        channel,
        app_name=config.email.app_name
    )
