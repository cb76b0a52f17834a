"""
Request class for routechain.
"""

import urllib.parse
from typing import Any, Dict, List, Optional, Tuple

from .extensions import Extensions
from .routing.paths import parse_pathname


class Request:
    """
    Request object handed to every handler of a chain.

    Exposes the request line (method and URL) and headers, plus two mutable
    slots filled while routing:
    - params: named path captures of the matched route (string to string)
    - extensions: free-form slots for middleware to pass data downstream

    Body parsing is left to the application.
    """

    def __init__(
        self,
        method: str,
        url: Optional[str],
        headers: Optional[Dict[str, str]] = None,
        scope: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize a Request.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, etc.)
            url: Request URL, origin-form ("/users?page=2") or absolute-form
            headers: Request headers (names are lowercased)
            scope: ASGI scope the request was built from, if any
        """
        self.method = method
        self.url = url
        self.scope: Dict[str, Any] = scope or {}
        self._headers: Dict[str, str] = {
            name.lower(): value for name, value in (headers or {}).items()
        }
        self._query_params: Optional[Dict[str, str]] = None
        self.params: Dict[str, str] = {}  # Named path captures
        self.extensions = Extensions()

    @classmethod
    def from_asgi(cls, scope: Dict[str, Any]) -> "Request":
        """
        Factory method to create a Request from an ASGI HTTP 'scope'.

        Args:
            scope: ASGI scope dictionary

        Returns:
            Request object
        """
        # raw_path keeps %3F and %23 from turning into separators again
        raw_path = scope.get("raw_path")
        if raw_path:
            path = raw_path.decode("latin-1").partition("?")[0]
        else:
            path = scope.get("path", "")
        query_string = scope.get("query_string", b"").decode("latin-1")
        url = f"{path}?{query_string}" if query_string else path

        headers = {}
        for name, value in scope.get("headers", []):
            headers[name.decode("latin-1")] = value.decode("latin-1")

        return cls(scope.get("method", "GET"), url, headers=headers, scope=scope)

    @property
    def path(self) -> Optional[str]:
        """Request path (e.g., '/api/users'), or None if the URL has none"""

        return parse_pathname(self.url)

    @property
    def headers(self) -> Dict[str, str]:
        """Request headers with lowercase names"""

        return self._headers

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get a header value by name (case-insensitive).

        Args:
            name: Header name (case-insensitive)
            default: Default value if header not found

        Returns:
            Header value or default
        """
        return self._headers.get(name.lower(), default)

    @property
    def query_string(self) -> str:
        """Raw query string (e.g., 'page=1&limit=10')"""

        if not self.url:
            return ""
        try:
            return urllib.parse.urlsplit(self.url).query
        except ValueError:
            return ""

    @property
    def query_params(self) -> Dict[str, str]:
        """
        Query parameters parsed as a dictionary.

        For duplicate parameters, only the first value is kept.

        Example: '?page=1&tags=python&tags=web' -> {'page': '1', 'tags': 'python'}
        """

        if self._query_params is None:
            self._query_params = {}
            for key, value in self.query_items():
                self._query_params.setdefault(key, value)
        return self._query_params

    def query_items(self) -> List[Tuple[str, str]]:
        """All query parameters in order, duplicates included."""
        return urllib.parse.parse_qsl(self.query_string, keep_blank_values=True)

    @property
    def scheme(self) -> str:
        """URL scheme as seen by the server ('http' or 'https')"""

        return self.scope.get("scheme", "http")

    def __repr__(self) -> str:
        return f"<Request {self.method} {self.url}>"
