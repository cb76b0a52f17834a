"""Deadline enforcement for the downstream chain."""

import asyncio
import logging
from http import HTTPStatus

from ..request import Request
from ..response import Response
from ..types import Continuation

logger = logging.getLogger(__name__)


class TimeoutMiddleware:
    """
    Bound the time the rest of the chain may take.

    The chain itself has no deadline: a handler that never continues and
    never responds leaves the request suspended. This middleware cancels the
    downstream chain after ``seconds`` and answers 504 unless a handler
    already finished the response.
    """

    def __init__(self, seconds: float):
        if seconds <= 0:
            raise ValueError("seconds must be positive")
        self.seconds = seconds

    async def __call__(self, request: Request, response: Response, next: Continuation) -> None:
        try:
            await asyncio.wait_for(next(), timeout=self.seconds)
        except asyncio.TimeoutError:
            logger.warning(
                "Chain timed out after %ss",
                self.seconds,
                extra={"method": request.method, "path": request.path},
            )
            if not response.finished:
                response.text(
                    HTTPStatus.GATEWAY_TIMEOUT.phrase,
                    status_code=HTTPStatus.GATEWAY_TIMEOUT,
                )
