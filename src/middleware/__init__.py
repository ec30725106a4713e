"""
Middleware Module.

Request logging and CORS for the dashboard API.
"""

from fastapi import FastAPI

from src.middleware.cors import setup_cors
from src.middleware.logging import LoggingMiddleware, setup_logging

__all__ = ["LoggingMiddleware", "setup_middleware"]


def setup_middleware(app: FastAPI) -> None:
    """
    Configure all middleware for the application.

    CORS is added last so it wraps the logger and preflight requests are
    logged too.

    Args:
        app: FastAPI application instance
    """
    setup_logging(app)
    setup_cors(app)
