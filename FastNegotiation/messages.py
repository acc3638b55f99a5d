"""
Request and response values for FastNegotiation.

Framework-neutral messages for the ``process(request, handler)`` pipeline.
Both are immutable: every ``with_*`` call returns a new value and leaves
the original untouched, so one request can be shared by concurrent
pipeline stages.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Protocol

from starlette.datastructures import Headers


def _freeze_headers(headers: Headers | Mapping[str, str] | None) -> Headers:
    if isinstance(headers, Headers):
        return headers
    return Headers(headers=dict(headers or {}))


def _set_header(headers: Headers, name: str, value: str) -> Headers:
    mutable = headers.mutablecopy()
    mutable[name] = value
    return Headers(raw=mutable.raw)


@dataclass(frozen=True)
class ServerRequest:
    """
    An incoming request.

    Attributes:
        method: HTTP method.
        path: Request path.
        headers: Case-insensitive request headers.
        attributes: Request-scoped values added by earlier pipeline stages.

    Example:
        ```python
        request = ServerRequest("GET", "/hello", {"Accept": "application/json"})
        tagged = request.with_attribute("user", "alice")

        request.get_attribute("user")  # None
        tagged.get_attribute("user")   # "alice"
        ```
    """

    method: str = "GET"
    path: str = "/"
    headers: Headers = field(default_factory=Headers)
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _freeze_headers(self.headers))
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    def get_header_line(self, name: str) -> str:
        """Get all values of a header joined by commas, or an empty string."""
        return ", ".join(self.headers.getlist(name))

    def has_header(self, name: str) -> bool:
        return name in self.headers

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def with_attribute(self, name: str, value: Any) -> "ServerRequest":
        """Return a copy of this request carrying one more attribute."""
        return replace(self, attributes={**self.attributes, name: value})


@dataclass(frozen=True)
class Response:
    """
    An outgoing response.

    Attributes:
        status_code: HTTP status code.
        headers: Case-insensitive response headers.
        body: Raw response body.
    """

    status_code: int = 200
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _freeze_headers(self.headers))

    def get_header_line(self, name: str) -> str:
        return ", ".join(self.headers.getlist(name))

    def has_header(self, name: str) -> bool:
        return name in self.headers

    def with_header(self, name: str, value: str) -> "Response":
        """Return a copy with ``name`` set to ``value``, replacing any existing values."""
        return replace(self, headers=_set_header(self.headers, name, value))


class RequestHandler(Protocol):
    """The next stage of a pipeline."""

    def handle(self, request: ServerRequest) -> Response: ...


@dataclass(frozen=True)
class CallableHandler:
    """
    Adapt a plain function into a ``RequestHandler``.

    Example:
        ```python
        handler = CallableHandler(lambda request: Response(body=b"OK"))
        negotiator.process(request, handler)
        ```
    """

    func: Callable[[ServerRequest], Response]

    def handle(self, request: ServerRequest) -> Response:
        return self.func(request)
