"""
Exceptions raised by routechain.

Every exception carries a machine-readable ``kind`` and the HTTP status code
the ASGI adapter maps it to. Handler-raised exceptions are never wrapped in
any of these; they reach the caller of ``Router.handle`` unchanged.
"""

from http import HTTPStatus
from typing import Any


class RouterError(Exception):
    """Base class for every error raised by the router itself."""

    kind: str = "RouterError"
    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind)
        self.message = message or self.kind


# ------------------ REGISTRATION ------------------


class ConfigurationError(RouterError):
    """Raised synchronously while routes or middleware are being registered."""

    kind = "ConfigurationError"


class NoHandlers(ConfigurationError):
    kind = "NoHandlers"

    def __init__(self, message: str = "At least one handler function must be passed"):
        super().__init__(message)


class InvalidMethod(ConfigurationError):
    kind = "InvalidMethod"

    def __init__(self, method: Any, allowed: Any = ()):
        super().__init__(
            f'The "method" parameter must be one of the following '
            f"[{','.join(allowed)}]. Value: {method!r}"
        )
        self.method = method


class InvalidPathType(ConfigurationError):
    kind = "InvalidPathType"

    def __init__(self, path: Any):
        super().__init__(f'The "path" parameter must be a string. Value: {path!r}')
        self.path = path


class InvalidHandler(ConfigurationError):
    kind = "InvalidHandler"

    def __init__(self, handler: Any):
        super().__init__(f"Handlers must be callables. Value: {handler!r}")
        self.handler = handler


class InvalidPattern(ConfigurationError):
    kind = "InvalidPattern"

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid path pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class MissingPrefix(ConfigurationError):
    kind = "MissingPrefix"

    def __init__(self, message: str = "prefix parameter is required"):
        super().__init__(message)


class MissingRouter(ConfigurationError):
    kind = "MissingRouter"

    def __init__(self, message: str = "router parameter is required"):
        super().__init__(message)


class NotARouter(ConfigurationError):
    kind = "NotARouter"

    def __init__(self, value: Any):
        super().__init__(
            f"router parameter must be Router instance, got {type(value).__name__}"
        )
        self.value = value


# ------------------ DISPATCH ------------------


class MalformedURL(RouterError):
    kind = "MalformedURL"
    status_code = HTTPStatus.BAD_REQUEST

    def __init__(self, url: Any):
        super().__init__(f"Could not parse pathname from url {url!r}")
        self.url = url


class RouteNotFound(RouterError):
    """No route matched. Check with ``Router.match`` first to avoid it."""

    kind = "RouteNotFound"
    status_code = HTTPStatus.NOT_FOUND

    def __init__(self, method: str, path: str):
        super().__init__(f"No route was found for {method} {path}")
        self.method = method
        self.path = path


class NoRegexMatch(RouterError):
    kind = "NoRegexMatch"

    def __init__(self, path: str, pattern: str):
        super().__init__(
            f"The pattern {pattern!r} for the given route did not match {path!r}"
        )
        self.path = path
        self.pattern = pattern


class ResponseAlreadyFinished(RouterError):
    kind = "ResponseAlreadyFinished"

    def __init__(self, message: str = "Response has already been finished"):
        super().__init__(message)


__all__ = [
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
