"""Define security-related HTTP headers to be added to responses."""
from typing import Dict, Optional

from ..request import Request
from ..response import Response
from ..types import Continuation

DEFAULT_SECURITY_HEADERS = {
    # 1. Prevents Clickjacking. Disallows the page to be framed.
    "X-Frame-Options": "DENY",

    # 2. Prevents MIME-type sniffing (that the browser "guesses" the Content-Type).
    "X-Content-Type-Options": "nosniff",

    # 3. Controls how much referrer information is sent.
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

class HttpHeadersMiddleware:
    """Middleware to add security-related HTTP headers to responses.

    Headers are set before the rest of the chain runs, so downstream handlers
    can still override them and they are in place even if a handler finishes
    the response.
    """

    def __init__(
        self,
        headers: Optional[Dict[str, str]] = None,
        hsts_max_age: int = 31536000,
        enable_hsts: bool = True
    ):
        """Initialize http headers middleware and HSTS settings."""
        self.headers = DEFAULT_SECURITY_HEADERS.copy()
        if headers:
            self.headers.update(headers)

        self.hsts_value: Optional[str] = None
        if enable_hsts:
            # HSTS is only included if HTTPS is used.
            self.hsts_value = f"max-age={hsts_max_age}; includeSubDomains"

    async def __call__(self, request: Request, response: Response, next: Continuation) -> None:
        for name, value in self.headers.items():
            response.set_header(name, value)

        if self.hsts_value and request.scheme.lower() == "https":
            response.set_header("Strict-Transport-Security", self.hsts_value)

        await next()
