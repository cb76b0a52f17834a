"""Wrap-around request logging for routechain chains."""

import logging
import time
from typing import Optional, Union

from ..request import Request
from ..response import Response
from ..types import Continuation

default_logger = logging.getLogger("routechain.access")


class RequestLoggerMiddleware:
    """
    Log one line per request once the rest of the chain has completed.

    Register it first so that its post-processing runs last:

        router.use_middleware(RequestLoggerMiddleware())

    Requests whose chain raises are logged at ERROR level and the exception
    is re-raised unchanged.
    """

    def __init__(self, logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None):
        self.logger = logger or default_logger

    async def __call__(self, request: Request, response: Response, next: Continuation) -> None:
        started = time.perf_counter()
        try:
            await next()
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            self.logger.error(
                "%s %s failed after %.2fms",
                request.method,
                request.path,
                elapsed_ms,
                extra={"method": request.method, "path": request.path},
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        self.logger.info(
            "%s %s %d %.2fms",
            request.method,
            request.path,
            response.status_code,
            elapsed_ms,
            extra={
                "method": request.method,
                "path": request.path,
                "status": response.status_code,
            },
        )
