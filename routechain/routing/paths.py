"""
Path normalization helpers.

Route patterns and request paths go through the same normalization so that
``/////foo``, ``/foo/`` and ``/bar/../foo`` all address the route ``/foo``.
"""

import posixpath
import re
import urllib.parse
from typing import Optional

_REPEATED_SLASHES = re.compile(r"/{2,}")


def normalize_path(path: str) -> str:
    """
    Return the canonical form of a path or path pattern.

    Repeated separators are collapsed, ``.`` and ``..`` segments are resolved
    (never above the root), the trailing separator is dropped and the result
    always starts with ``/``.

    Examples:
        >>> normalize_path("/////foo")
        '/foo'
        >>> normalize_path("/a/./b/../c/")
        '/a/c'
        >>> normalize_path("")
        '/'
    """
    collapsed = _REPEATED_SLASHES.sub("/", "/" + path)
    # posixpath keeps a leading "//", collapsing first avoids it
    normalized = posixpath.normpath(collapsed)
    return normalized if normalized.startswith("/") else "/" + normalized


def join_paths(prefix: str, path: str) -> str:
    """Mount ``path`` under ``prefix`` and normalize the result."""
    return normalize_path(f"{prefix}/{path}")


def parse_pathname(url: Optional[str]) -> Optional[str]:
    """
    Extract the path component of a request URL.

    Accepts origin-form (``/users?page=2``) and absolute-form
    (``http://host/users``) URLs. An absolute URL without a path yields ``/``.

    Returns:
        The raw (not normalized) path, or None when the URL cannot be parsed
        or carries no path.
    """
    if not isinstance(url, str) or not url:
        return None
    try:
        parts = urllib.parse.urlsplit(url)
    except ValueError:
        return None
    if parts.path:
        return parts.path
    return "/" if parts.netloc else None
