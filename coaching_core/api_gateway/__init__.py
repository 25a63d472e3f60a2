"""
API Gateway Module

Main FastAPI application with all API endpoints.
"""

from .main import app

__all__ = ["app"]
