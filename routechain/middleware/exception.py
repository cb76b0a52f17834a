"""
Exception handling middleware for routechain.

Captures exceptions raised by downstream handlers and writes them as JSON
responses. Router and Route never catch handler errors themselves; adding
this middleware is how an application opts in.

Mode-controlled output:
        mode="production":
                {"error": {"type": "INTERNAL_SERVER_ERROR", "message": "Internal Server Error"}}
        mode="debug":
                {"error": {"type": "ValueError", "message": "Invalid value", "detail": "repr(...)", "traceback": "..."}}
"""

from __future__ import annotations

import logging
import traceback
from http import HTTPStatus
from typing import TYPE_CHECKING, Literal

from ..types import Continuation

if TYPE_CHECKING:  # pragma: no cover - only for type hints
    from ..request import Request
    from ..response import Response

logger = logging.getLogger(__name__)


class ExceptionMiddleware:
    """Middleware that converts downstream exceptions to JSON 500 responses.

    Args:
            mode: Either "production" (default) for minimal messages or "debug" for full traceback.
    """

    def __init__(self, mode: Literal["production", "debug"] = "production"):
        self.mode = mode.lower()

    async def __call__(
        self, request: "Request", response: "Response", next: Continuation
    ) -> None:
        upstream = dict(response.headers)
        try:
            await next()
        except Exception as exc:
            logger.exception(
                "Handler raised %s",
                type(exc).__name__,
                extra={"method": request.method, "path": request.path},
            )
            if response.finished:
                return

            if self.mode == "debug":
                tb = "".join(
                    traceback.format_exception(type(exc), exc, exc.__traceback__)
                )
                payload = {
                    "error": {
                        "type": type(exc).__name__,
                        "message": str(exc),
                        "detail": repr(exc),
                        "traceback": tb,
                    }
                }
            else:
                payload = {
                    "error": {
                        "type": HTTPStatus.INTERNAL_SERVER_ERROR.name,
                        "message": "Internal Server Error",
                    }
                }

            # headers set before this middleware ran survive the error
            response.reset(upstream)
            response.json(payload, status_code=HTTPStatus.INTERNAL_SERVER_ERROR)


__all__ = ["ExceptionMiddleware"]
