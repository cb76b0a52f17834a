"""
Response class for routechain.
"""

import json
from http import HTTPStatus
from typing import Any, Dict, List, Optional, Union

from .exceptions import ResponseAlreadyFinished


class Response:
    """
    Writable response sink shared by all handlers of a chain.

    Handlers write to it instead of returning a value, so middleware placed
    after ``await next()`` can still inspect or decorate it.

    Supports:
    - Status code and header mutation until the response is finished
    - Incremental writes (str is encoded as UTF-8)
    - Helpers that write a whole body and finish: text(), html(), json(), redirect()
    - Conversion to ASGI messages
    """

    def __init__(
        self,
        status_code: Union[int, HTTPStatus] = HTTPStatus.OK,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize Response object.

        Args:
            status_code: Initial HTTP status code (int or HTTPStatus enum)
            headers: Initial response headers
        """
        self.status_code = int(status_code)  # Convert HTTPStatus enum to int
        self.headers: Dict[str, str] = {
            name.lower(): value for name, value in (headers or {}).items()
        }
        self._chunks: List[bytes] = []
        self.finished = False

    def _ensure_writable(self) -> None:
        if self.finished:
            raise ResponseAlreadyFinished()

    def set_status(self, status_code: Union[int, HTTPStatus]) -> "Response":
        """
        Set the status code (supports method chaining).

        Raises:
            ResponseAlreadyFinished: If end() was already called
        """
        self._ensure_writable()
        self.status_code = int(status_code)
        return self

    def set_header(self, name: str, value: str) -> "Response":
        """
        Set a response header (supports method chaining).

        Args:
            name: Header name (stored lowercase)
            value: Header value

        Returns:
            self for method chaining
        """
        self._ensure_writable()
        self.headers[name.lower()] = value
        return self

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name.lower(), default)

    def write(self, data: Union[str, bytes]) -> "Response":
        """
        Append data to the body.

        Args:
            data: Body chunk; str is encoded as UTF-8

        Raises:
            ResponseAlreadyFinished: If end() was already called
            TypeError: If data is neither str nor bytes
        """
        self._ensure_writable()
        if isinstance(data, str):
            data = data.encode("utf-8")
        elif not isinstance(data, (bytes, bytearray)):
            raise TypeError(f"Response body must be str or bytes, got {type(data).__name__}")
        self._chunks.append(bytes(data))
        return self

    def end(self, data: Union[str, bytes, None] = None) -> None:
        """Write an optional last chunk and finish the response."""
        if data is not None:
            self.write(data)
        self._ensure_writable()
        self.finished = True

    # ------------------ BODY HELPERS ------------------

    def text(
        self, content: str, status_code: Optional[Union[int, HTTPStatus]] = None
    ) -> None:
        """Finish with a plain text body."""
        self._send(content, "text/plain; charset=utf-8", status_code)

    def html(
        self, content: str, status_code: Optional[Union[int, HTTPStatus]] = None
    ) -> None:
        """Finish with an HTML body."""
        self._send(content, "text/html; charset=utf-8", status_code)

    def json(
        self, content: Any, status_code: Optional[Union[int, HTTPStatus]] = None
    ) -> None:
        """Finish with a JSON body."""
        body = json.dumps(content, ensure_ascii=False)
        self._send(body, "application/json; charset=utf-8", status_code)

    def redirect(
        self,
        location: str,
        status_code: Union[int, HTTPStatus] = HTTPStatus.TEMPORARY_REDIRECT,
    ) -> None:
        """Finish with a redirect to ``location``."""
        self.set_header("location", location)
        self._send("", None, status_code)

    def _send(
        self,
        body: str,
        content_type: Optional[str],
        status_code: Optional[Union[int, HTTPStatus]],
    ) -> None:
        if status_code is not None:
            self.set_status(status_code)
        if content_type and "content-type" not in self.headers:
            self.set_header("content-type", content_type)
        self.end(body)

    def reset(self, headers: Optional[Dict[str, str]] = None) -> "Response":
        """
        Discard the status and body written so far.

        Args:
            headers: Headers to keep, minus Content-Type and Content-Length.
                All headers are cleared when omitted.

        Raises:
            ResponseAlreadyFinished: If end() was already called
        """
        self._ensure_writable()
        self.status_code = int(HTTPStatus.OK)
        kept = {k.lower(): v for k, v in (headers or {}).items()}
        kept.pop("content-type", None)
        kept.pop("content-length", None)
        self.headers.clear()
        self.headers.update(kept)
        self._chunks.clear()
        return self

    @property
    def body(self) -> bytes:
        """Body written so far."""
        return b"".join(self._chunks)

    def to_asgi_messages(self) -> List[Dict[str, Any]]:
        """
        Convert the response to the ASGI 'http.response.start' and
        'http.response.body' messages.
        """
        body = self.body
        headers = dict(self.headers)
        headers.setdefault("content-length", str(len(body)))
        return [
            {
                "type": "http.response.start",
                "status": self.status_code,
                "headers": [
                    (name.encode("latin-1"), value.encode("latin-1"))
                    for name, value in headers.items()
                ],
            },
            {"type": "http.response.body", "body": body, "more_body": False},
        ]

    def __repr__(self) -> str:
        state = "finished" if self.finished else "open"
        return f"<Response {self.status_code} {state}>"
