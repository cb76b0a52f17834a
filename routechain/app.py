"""
ASGI adapter for routechain.

Serves a Router from any ASGI server (uvicorn for example): builds the
Request/Response pair for each HTTP connection, runs ``Router.handle`` and
maps router errors to HTTP responses.
"""

import logging
from http import HTTPStatus
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .config import Settings
from .exceptions import RouterError
from .request import Request
from .response import Response
from .routing import Router
from .types import EventHandlerType, HandlerType

logger = logging.getLogger(__name__)

# ASGI type aliases
ASGIScope = Dict[str, Any]
ASGIReceive = Callable[[], Awaitable[Dict[str, Any]]]
ASGISend = Callable[[Dict[str, Any]], Awaitable[None]]


class RouteChain:
    """Main application class. Wraps a Router as an ASGI application."""

    def __init__(
        self,
        router: Optional[Router] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize the application.

        Args:
            router: Optional router instance. If not provided, a new Router is created.
            settings: Optional settings. Defaults to ``Settings()``.
        """
        self.router = router or Router()
        self.settings = settings or Settings()

        # Lifespan event handlers
        self._startup_handlers: List[EventHandlerType] = []
        self._shutdown_handlers: List[EventHandlerType] = []

    # ------------------ REGISTRATION ------------------

    def add_route(self, method: str, path: str, *handlers: HandlerType) -> "RouteChain":
        self.router.add_route(method, path, *handlers)
        return self

    def use_middleware(self, *handlers: HandlerType) -> "RouteChain":
        self.router.use_middleware(*handlers)
        return self

    def use_subrouter(self, prefix: str, router: Router) -> "RouteChain":
        self.router.use_subrouter(prefix, router)
        return self

    def all(self, path: str, *handlers: HandlerType) -> "RouteChain":
        self.router.all(path, *handlers)
        return self

    def get(self, path: str, *handlers: HandlerType) -> "RouteChain":
        self.router.get(path, *handlers)
        return self

    def post(self, path: str, *handlers: HandlerType) -> "RouteChain":
        self.router.post(path, *handlers)
        return self

    def put(self, path: str, *handlers: HandlerType) -> "RouteChain":
        self.router.put(path, *handlers)
        return self

    def patch(self, path: str, *handlers: HandlerType) -> "RouteChain":
        self.router.patch(path, *handlers)
        return self

    def delete(self, path: str, *handlers: HandlerType) -> "RouteChain":
        self.router.delete(path, *handlers)
        return self

    def head(self, path: str, *handlers: HandlerType) -> "RouteChain":
        self.router.head(path, *handlers)
        return self

    def options(self, path: str, *handlers: HandlerType) -> "RouteChain":
        self.router.options(path, *handlers)
        return self

    def route(self, method: str, path: str):
        """Decorator for registering a handler. See ``Router.route``."""
        return self.router.route(method, path)

    # Lifespan event handlers
    def _register_event_handler(self, event_type: str, func: EventHandlerType) -> None:
        """
        Internal method to register an event handler.

        Args:
            event_type: Either "startup" or "shutdown"
            func: Async function to call during the event

        Raises:
            ValueError: If event_type is not "startup" or "shutdown"
        """
        if event_type == "startup":
            self._startup_handlers.append(func)
        elif event_type == "shutdown":
            self._shutdown_handlers.append(func)
        else:
            raise ValueError(
                f"Invalid event type: {event_type}. Must be 'startup' or 'shutdown'"
            )

    def on_event(self, event_type: str):
        """
        Register a function to run on application startup or shutdown.

        Example:
            @app.on_event("startup")
            async def open_pool():
                ...
        """

        def decorator(func: EventHandlerType) -> EventHandlerType:
            self._register_event_handler(event_type, func)
            return func

        return decorator

    def add_event_handler(self, event_type: str, func: EventHandlerType) -> None:
        """Add an event handler for startup or shutdown."""
        self._register_event_handler(event_type, func)

    # ------------------ ASGI ------------------

    async def __call__(self, scope: ASGIScope, receive: ASGIReceive, send: ASGISend):
        """
        ASGI application entrypoint.
        This method is called by the ASGI server for each incoming connection.
        """
        if scope["type"] == "http":
            await self._handle_http(scope, send)
        elif scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
        else:
            # For non-HTTP protocols, just close the connection
            await send({"type": "websocket.close", "code": 1000})

    async def _handle_lifespan(self, receive: ASGIReceive, send: ASGISend):
        """
        Handle the ASGI lifespan protocol until the server shuts down.
        """
        while True:
            message = await receive()

            if message["type"] == "lifespan.startup":
                try:
                    for handler in self._startup_handlers:
                        await handler()
                except Exception as exc:
                    logger.exception("Startup handler failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif message["type"] == "lifespan.shutdown":
                try:
                    for handler in self._shutdown_handlers:
                        await handler()
                except Exception as exc:
                    logger.exception("Shutdown handler failed")
                    await send({"type": "lifespan.shutdown.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def _handle_http(self, scope: ASGIScope, send: ASGISend):
        """
        Run the router for one HTTP request and send whatever the chain wrote.

        The request body is not read; handlers that need it parse it themselves
        from the scope.
        """
        request = Request.from_asgi(scope)
        response = Response()

        try:
            await self.router.handle(request, response)
        except RouterError as exc:
            logger.info(
                "%s: %s",
                exc.kind,
                exc.message,
                extra={"method": request.method, "path": request.path, "status": exc.status_code},
            )
            response = self._error_response(exc.status_code, exc.message)
        except Exception as exc:
            logger.exception(
                "Unhandled exception while handling request",
                extra={"method": request.method, "path": request.path},
            )
            response = self._error_response(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))

        for message in response.to_asgi_messages():
            await send(message)

    def _error_response(self, status_code: int, detail: str) -> Response:
        status = HTTPStatus(status_code)
        body = status.phrase
        if self.settings.debug and status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            body = f"{status.phrase}: {detail}"
        response = Response(status)
        response.text(body)
        return response

    def __repr__(self) -> str:
        return f"<RouteChain {self.router!r}>"
