"""
Conversation Tutor API package.

Provides the FastAPI application for the meeting practice service.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
