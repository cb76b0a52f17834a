"""
Route class for routechain.

Represents one (method, path pattern) binding with its handler chain.
"""

import logging
from typing import TYPE_CHECKING, List, Tuple

from ..exceptions import (
    InvalidHandler,
    InvalidMethod,
    InvalidPathType,
    MalformedURL,
    NoHandlers,
    NoRegexMatch,
)
from ..types import HandlerType, Methods
from .chain import ChainRunner
from .paths import normalize_path, parse_pathname
from .pattern import PatternMatcher, compile_pattern

if TYPE_CHECKING:
    from ..request import Request
    from ..response import Response

logger = logging.getLogger(__name__)


def validate_method(method) -> str:
    """
    Return the canonical method string or raise InvalidMethod.

    Accepts a ``Methods`` member or its exact (uppercase) string value.
    """
    if isinstance(method, Methods):
        return method.value
    if isinstance(method, str) and method in Methods.values():
        return method
    raise InvalidMethod(method, Methods.values())


def validate_handlers(handlers) -> Tuple[HandlerType, ...]:
    """Return ``handlers`` as a tuple, raising if empty or not callable."""
    if not handlers:
        raise NoHandlers()
    for handler in handlers:
        if not callable(handler):
            raise InvalidHandler(handler)
    return tuple(handlers)


class Route:
    """
    A single route: HTTP method, normalized path pattern and handler chain.

    Method, path and matcher are fixed at construction. The only mutation is
    appending handlers (``add_handlers``), which the Router does when the same
    (method, path) is registered again.

    Attributes:
        method (str): One of the standard HTTP methods, e.g. "GET".

        path (str): Normalized path pattern. Repeated slashes are collapsed,
                    "." and ".." resolved and the trailing slash removed.
                    Examples: "/users", "/users/:user_id", "/files/:name(\\w+)"

        handlers (List[HandlerType]): The chain, run in order by dispatch().
                                      Never empty.

        matcher (PatternMatcher): Compiled form of ``path``.

        param_names (Tuple[str, ...]): Named parameters of ``path`` in
                                       declaration order.

    Example:
        >>> async def show_user(request, response):
        ...     response.json({"id": request.params["user_id"]})
        >>>
        >>> route = Route("GET", "/users/:user_id", show_user)
        >>> route.matcher.exec("/users/42")
        ('42',)
    """

    def __init__(self, method: str, path: str, *handlers: HandlerType):
        """
        Initialize a Route.

        Args:
            method: HTTP method (a ``Methods`` member or its string value)
            path: Path pattern (e.g., "/users", "/users/:user_id")
            *handlers: Initial handler chain, at least one

        Raises:
            InvalidMethod: If method is not a standard HTTP method
            InvalidPathType: If path is not a string
            NoHandlers: If no handler is given
            InvalidHandler: If a handler is not callable
            InvalidPattern: If the path pattern cannot be compiled
        """
        self.method = validate_method(method)
        if not isinstance(path, str):
            raise InvalidPathType(path)
        self.handlers: List[HandlerType] = list(validate_handlers(handlers))
        self.path = normalize_path(path)
        self.matcher: PatternMatcher = compile_pattern(self.path)
        self.param_names: Tuple[str, ...] = self.matcher.param_names

    def add_handlers(self, *handlers: HandlerType) -> None:
        """Append handlers to the end of the chain."""
        self.handlers.extend(validate_handlers(handlers))

    def matches(self, method: str, path: str) -> bool:
        """
        Check if this route matches the given method and normalized path.

        Args:
            method: HTTP method
            path: Request path, already normalized
        """
        return method == self.method and self.matcher.test(path)

    async def dispatch(self, request: "Request", response: "Response") -> None:
        """
        Bind path parameters to the request and run the handler chain.

        Args:
            request: The request; its ``params`` are updated in place
            response: The response sink handed to every handler

        Raises:
            MalformedURL: If no path can be parsed from ``request.url``
            NoRegexMatch: If the path does not satisfy this route's pattern
        """
        pathname = parse_pathname(request.url)
        if pathname is None:
            raise MalformedURL(request.url)

        path = normalize_path(pathname)
        captures = self.matcher.exec(path)
        if captures is None:
            raise NoRegexMatch(path, self.path)

        for name, value in zip(self.param_names, captures):
            if value is not None:
                request.params[name] = value

        logger.debug(
            "Dispatching %s %s to %d handler(s)",
            self.method,
            path,
            len(self.handlers),
            extra={"method": self.method, "path": path, "route": self.path},
        )
        await ChainRunner(self.handlers, request, response).run()

    def __repr__(self) -> str:
        return f"<Route {self.method} {self.path} handlers={len(self.handlers)}>"
