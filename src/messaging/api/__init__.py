"""Messaging domain API package."""

from messaging.api.routes import request_router, thread_router

__all__ = ["thread_router", "request_router"]
