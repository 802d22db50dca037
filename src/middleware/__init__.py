"""
Middleware Module.

CORS and request logging for the matching API.
"""

from fastapi import FastAPI

from src.middleware.cors import setup_cors
from src.middleware.logging import setup_logging


def setup_middleware(app: FastAPI) -> None:
    """
    Register middleware on the API app.

    Logging is added last so it wraps CORS and sees every response,
    preflight requests included.
    """
    setup_cors(app)
    setup_logging(app)
