"""
routechain Testing Package.

Provides in-process testing utilities for routechain applications:
- TestClient: Main testing interface, drives the ASGI app directly
- TestRequest: Builder pattern for HTTP requests
- TestResponse: Response examination utilities
"""

from .client import TestClient
from .request import TestRequest
from .response import TestResponse

__all__ = ["TestClient", "TestRequest", "TestResponse"]
