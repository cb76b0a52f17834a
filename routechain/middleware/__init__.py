"""
Built-in chain middleware for routechain.

Each middleware is a handler with the chain signature
``(request, response, next)`` and is registered like any other handler:

    router.use_middleware(RequestLoggerMiddleware(), TimeoutMiddleware(5))
"""

from .exception import ExceptionMiddleware
from .http_headers import HttpHeadersMiddleware
from .request_logger import RequestLoggerMiddleware
from .timeout import TimeoutMiddleware

__all__ = [
    "ExceptionMiddleware",
    "HttpHeadersMiddleware",
    "RequestLoggerMiddleware",
    "TimeoutMiddleware",
]
