"""
Execution of a route's handler chain.

A ``ChainRunner`` walks one chain for one request. Each handler receives the
runner's ``advance`` method as its continuation (conventionally named
``next``); awaiting it runs the rest of the chain, and code placed after the
await runs on the way back out:

    async def timing(request, response, next):
        started = time.perf_counter()
        await next()
        response.set_header("x-elapsed", f"{time.perf_counter() - started:.4f}")

Plain ``def`` handlers can continue too. Calling ``next()`` moves the cursor
at once; the rest of the chain runs when the handler returns, unless the
handler returns the continuation for the runner to await:

    def tag(request, response, next):
        request.extensions.tagged = True
        next()

A handler that never calls ``next`` ends the chain there.
"""

import inspect
from typing import TYPE_CHECKING, Any, Awaitable, Generator, List, Sequence

from ..types import HandlerType

if TYPE_CHECKING:
    from ..request import Request
    from ..response import Response


def accepts_continuation(handler: Any) -> bool:
    """Return True if ``handler`` takes a third positional argument."""
    try:
        sig = inspect.signature(handler)
    except (TypeError, ValueError):
        return True

    positional = 0
    for param in sig.parameters.values():
        if param.kind == inspect.Parameter.VAR_POSITIONAL:
            return True
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            positional += 1
    return positional >= 3


class PendingStep:
    """
    Awaitable returned by ``ChainRunner.advance``.

    Wraps the downstream coroutine and remembers whether anyone awaited it.
    """

    __slots__ = ("coro", "awaited")

    def __init__(self, coro: Awaitable[None]):
        self.coro = coro
        self.awaited = False

    def __await__(self) -> Generator[Any, None, None]:
        self.awaited = True
        return self.coro.__await__()

    def close(self) -> None:
        if not self.awaited:
            self.coro.close()


class ChainRunner:
    """
    Cursor over a handler chain.

    Attributes:
        chain (Sequence[HandlerType]): Handlers to run, in order.
        cursor (int): Index of the handler currently running.
    """

    __slots__ = ("chain", "cursor", "request", "response", "_pending")

    def __init__(self, chain: Sequence[HandlerType], request: "Request", response: "Response"):
        self.chain = tuple(chain)
        self.cursor = 0
        self.request = request
        self.response = response
        self._pending: List[PendingStep] = []

    async def run(self) -> None:
        """Run the chain from its first handler."""
        self.cursor = 0
        if self.chain:
            await self._call(self.chain[0])

    def advance(self) -> PendingStep:
        """
        Continuation handed to handlers.

        Moves the cursor forward immediately and returns an awaitable that
        runs the handler found there; past the end of the chain it does
        nothing. Awaiting it returns once that handler and everything
        downstream of it have completed.
        """
        self.cursor += 1
        step = PendingStep(self._run_at(self.cursor))
        self._pending.append(step)
        return step

    async def _run_at(self, index: int) -> None:
        if index < len(self.chain):
            await self._call(self.chain[index])

    async def _call(self, handler: HandlerType) -> None:
        mark = len(self._pending)
        args = (self.request, self.response)
        if accepts_continuation(handler):
            args += (self.advance,)

        try:
            result = handler(*args)
        except BaseException:
            for step in self._pending[mark:]:
                step.close()
            del self._pending[mark:]
            raise

        if inspect.isawaitable(result):
            try:
                await result
            finally:
                del self._pending[mark:]
            return

        # a plain def handler called next() without returning it
        steps = self._pending[mark:]
        del self._pending[mark:]
        for step in steps:
            if not step.awaited:
                await step

    def __repr__(self) -> str:
        return f"<ChainRunner {self.cursor}/{len(self.chain)}>"
