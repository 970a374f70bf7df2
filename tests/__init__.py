#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Using unittest
    python -m unittest discover tests -v

Repository and endpoint tests use an in-memory SQLite database, so no
external services are required.
"""

from sqlalchemy.pool import StaticPool

from database.database import Database

TEST_DB_URL = "sqlite://"


def create_test_database() -> Database:
    """
    Build a fresh in-memory database with all tables created.

    StaticPool keeps the single in-memory connection alive across sessions
    and threads (FastAPI runs sync dependencies in a threadpool).
    """
    database = Database(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database.create_all()
    return database
