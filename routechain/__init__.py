"""
routechain - an ordered request router with explicit handler chains.
"""

from .app import RouteChain
from .config import Settings
from .exceptions import (
    ConfigurationError,
    InvalidHandler,
    InvalidMethod,
    InvalidPathType,
    InvalidPattern,
    MalformedURL,
    MissingPrefix,
    MissingRouter,
    NoHandlers,
    NoRegexMatch,
    NotARouter,
    ResponseAlreadyFinished,
    RouteNotFound,
    RouterError,
)
from .extensions import Extensions
from .request import Request
from .response import Response
from .routing import ChainRunner, Route, Router
from .types import Methods

__version__ = "0.1.0"
__all__ = [
    "RouteChain",
    "Router",
    "Route",
    "ChainRunner",
    "Request",
    "Response",
    "Extensions",
    "Methods",
    "Settings",
    "RouterError",
    "ConfigurationError",
    "NoHandlers",
    "InvalidMethod",
    "InvalidPathType",
    "InvalidHandler",
    "InvalidPattern",
    "MissingPrefix",
    "MissingRouter",
    "NotARouter",
    "MalformedURL",
    "RouteNotFound",
    "NoRegexMatch",
    "ResponseAlreadyFinished",
]
