from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Union

if TYPE_CHECKING:
    from .request import Request
    from .response import Response

Continuation = Callable[[], Awaitable[None]]
HandlerType = Union[
    Callable[["Request", "Response"], Any],
    Callable[["Request", "Response", Continuation], Any],
]
EventHandlerType = Callable[[], Awaitable[None]]


class Methods(str, Enum):
    GET = 'GET'
    HEAD = 'HEAD'
    POST = 'POST'
    PUT = 'PUT'
    DELETE = 'DELETE'
    CONNECT = 'CONNECT'
    OPTIONS = 'OPTIONS'
    TRACE = 'TRACE'
    PATCH = 'PATCH'

    @classmethod
    def values(cls) -> tuple:
        return tuple(member.value for member in cls)


# the methods registered by Router.all, in registration order
ALL_METHODS = (
    Methods.OPTIONS,
    Methods.HEAD,
    Methods.GET,
    Methods.POST,
    Methods.PUT,
    Methods.PATCH,
    Methods.DELETE,
)
