"""
Router class for routechain.

Owns the ordered route table and the middleware list, and dispatches
requests to the first matching route.
"""

import logging
from typing import TYPE_CHECKING, Callable, Iterator, List, Optional

from ..exceptions import (
    InvalidPathType,
    MalformedURL,
    MissingPrefix,
    MissingRouter,
    NotARouter,
    RouteNotFound,
)
from ..types import ALL_METHODS, HandlerType, Methods
from .paths import join_paths, normalize_path, parse_pathname
from .route import Route, validate_handlers, validate_method

if TYPE_CHECKING:
    from ..request import Request
    from ..response import Response

logger = logging.getLogger(__name__)


class Router:
    """
    Ordered route registry with chain-style middleware.

    - Routes are matched in registration order; the first route whose method
      and pattern both match wins, so overlapping patterns must be registered
      most specific first.
    - Registering the same (method, path) again appends to the existing
      route's chain instead of creating a second route.
    - Middleware is snapshotted when a route is first created: it is placed in
      front of that route's handlers, and middleware added later never
      reaches routes that already exist.

    Registration (add_route, use_middleware, use_subrouter and the verb
    helpers) is meant for a single-threaded setup phase; the table is not
    synchronized against mutation during live dispatch.
    """

    def __init__(self):
        self.routes: List[Route] = []
        self.middleware: List[HandlerType] = []

    # ------------------ LOOKUP ------------------

    def match(self, method: str, path: str) -> Optional[Route]:
        """
        Find the first route registered for ``method`` whose pattern matches.

        Args:
            method: HTTP method
            path: Request path; normalized before matching

        Returns:
            The matching Route, or None
        """
        if isinstance(method, Methods):
            method = method.value
        path = normalize_path(path)
        for route in self.routes:
            if route.matches(method, path):
                return route
        return None

    async def handle(self, request: "Request", response: "Response") -> None:
        """
        Dispatch a request to its route.

        Args:
            request: The request; must expose ``method`` and ``url``
            response: The response sink handed to the handlers

        Raises:
            MalformedURL: If no path can be parsed from ``request.url``
            RouteNotFound: If no route matches the method and path
        """
        pathname = parse_pathname(request.url)
        if pathname is None:
            raise MalformedURL(request.url)

        method = request.method or ""
        route = self.match(method, pathname)
        if route is None:
            raise RouteNotFound(method, pathname)

        await route.dispatch(request, response)

    def _find(self, method: str, path: str) -> Optional[Route]:
        for route in self.routes:
            if route.method == method and route.path == path:
                return route
        return None

    # ------------------ REGISTRATION ------------------

    def add_route(self, method: str, path: str, *handlers: HandlerType) -> "Router":
        """
        Register handlers for a (method, path) pair.

        On first registration the route's chain is the current middleware
        followed by ``handlers``. On later registrations ``handlers`` are
        appended and middleware is not applied again.

        Args:
            method: HTTP method (a ``Methods`` member or its string value)
            path: Path pattern (e.g., "/users/:user_id")
            *handlers: Handlers to append, at least one

        Returns:
            self for method chaining

        Raises:
            NoHandlers: If no handler is given
            InvalidMethod, InvalidPathType, InvalidHandler, InvalidPattern:
                On invalid arguments
        """
        handlers = validate_handlers(handlers)
        method = validate_method(method)
        if not isinstance(path, str):
            raise InvalidPathType(path)

        middleware = tuple(self.middleware)
        normalized = normalize_path(path)

        route = self._find(method, normalized)
        if route is None:
            # middleware snapshot first, then the explicit handlers
            route = Route(method, normalized, *middleware, *handlers)
            self.routes.append(route)
            logger.debug(
                "Created route %s %s with %d middleware and %d handler(s)",
                method,
                normalized,
                len(middleware),
                len(handlers),
                extra={"method": method, "route": normalized},
            )
        else:
            route.add_handlers(*handlers)
            logger.debug(
                "Appended %d handler(s) to existing route %s %s",
                len(handlers),
                method,
                normalized,
                extra={"method": method, "route": normalized},
            )

        return self

    def use_middleware(self, *handlers: HandlerType) -> "Router":
        """
        Append middleware for routes created from now on.

        Routes that already exist are not modified.

        Returns:
            self for method chaining

        Raises:
            NoHandlers: If no handler is given
            InvalidHandler: If a handler is not callable
        """
        self.middleware.extend(validate_handlers(handlers))
        return self

    def use_subrouter(self, prefix: str, router: "Router") -> "Router":
        """
        Mount the routes of another router under ``prefix``.

        The sub router's routes are copied as they are right now; routes added
        to it afterwards are not mounted. Each copied route goes through
        ``add_route``, so this router's current middleware is placed ahead of
        the sub router's chain, unless a route already exists at the mounted
        (method, path), in which case the chain is only appended.

        Args:
            prefix: Mount point (e.g., "/api")
            router: The Router whose routes are mounted

        Returns:
            self for method chaining

        Raises:
            MissingPrefix: If prefix is empty or None
            MissingRouter: If router is None
            NotARouter: If router is not a Router
        """
        if not prefix:
            raise MissingPrefix()
        if not isinstance(prefix, str):
            raise InvalidPathType(prefix)
        if router is None:
            raise MissingRouter()
        if not isinstance(router, Router):
            raise NotARouter(router)

        mounted = list(router.routes)
        for route in mounted:
            self.add_route(route.method, join_paths(prefix, route.path), *route.handlers)

        logger.debug(
            "Mounted %d route(s) under %s",
            len(mounted),
            normalize_path(prefix),
            extra={"route": normalize_path(prefix)},
        )
        return self

    # ------------------ VERB HELPERS ------------------

    def all(self, path: str, *handlers: HandlerType) -> "Router":
        """Register the same handlers under OPTIONS, HEAD, GET, POST, PUT, PATCH and DELETE."""
        for method in ALL_METHODS:
            self.add_route(method, path, *handlers)
        return self

    def options(self, path: str, *handlers: HandlerType) -> "Router":
        return self.add_route(Methods.OPTIONS, path, *handlers)

    def head(self, path: str, *handlers: HandlerType) -> "Router":
        return self.add_route(Methods.HEAD, path, *handlers)

    def get(self, path: str, *handlers: HandlerType) -> "Router":
        return self.add_route(Methods.GET, path, *handlers)

    def post(self, path: str, *handlers: HandlerType) -> "Router":
        return self.add_route(Methods.POST, path, *handlers)

    def put(self, path: str, *handlers: HandlerType) -> "Router":
        return self.add_route(Methods.PUT, path, *handlers)

    def patch(self, path: str, *handlers: HandlerType) -> "Router":
        return self.add_route(Methods.PATCH, path, *handlers)

    def delete(self, path: str, *handlers: HandlerType) -> "Router":
        return self.add_route(Methods.DELETE, path, *handlers)

    # ------------------ DECORATORS ------------------

    def route(self, method: str, path: str) -> Callable[[HandlerType], HandlerType]:
        """
        Decorator for registering a handler.

        Usage:
            @router.route("GET", "/users/:user_id")
            async def show_user(request, response):
                response.json({"id": request.params["user_id"]})
        """

        def decorator(handler: HandlerType) -> HandlerType:
            self.add_route(method, path, handler)
            return handler

        return decorator

    def use(self) -> Callable[[HandlerType], HandlerType]:
        """
        Decorator for registering middleware.

        Usage:
            @router.use()
            async def log(request, response, next):
                # pre-processing
                await next()
                # post-processing
        """

        def decorator(handler: HandlerType) -> HandlerType:
            self.use_middleware(handler)
            return handler

        return decorator

    def __iter__(self) -> Iterator[Route]:
        return iter(list(self.routes))

    def __len__(self) -> int:
        return len(self.routes)

    def __repr__(self) -> str:
        return f"<Router routes={len(self.routes)} middleware={len(self.middleware)}>"

