"""
Base middleware class for FastMVC middlewares.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.types import ASGIApp


class FastMVCMiddleware(BaseHTTPMiddleware):
    """
    Base class for FastMVC middlewares.

    Adds path exclusion on top of Starlette's ``BaseHTTPMiddleware``.
    Subclasses implement ``dispatch`` and call ``should_skip`` first.

    Attributes:
        exclude_paths: Request paths the middleware passes through untouched.
    """

    def __init__(self, app: ASGIApp, exclude_paths: set[str] | None = None) -> None:
        super().__init__(app)
        self.exclude_paths: frozenset[str] = frozenset(exclude_paths or ())

    def should_skip(self, request: Request) -> bool:
        """Check if the request path is excluded."""
        return request.url.path in self.exclude_paths
