"""
Content Negotiation Middleware for FastMVC.

Handles Accept header parsing and media type negotiation.
"""

import logging
from collections.abc import Awaitable, Callable
from contextvars import ContextVar
from dataclasses import dataclass

from starlette.requests import Request
from starlette.responses import Response

from FastNegotiation.base import FastMVCMiddleware
from FastNegotiation.exceptions import NegotiationConfigError
from FastNegotiation.media_type import MediaType
from FastNegotiation.negotiator import NegotiationConfig, Negotiator


_media_type_ctx: ContextVar[MediaType | None] = ContextVar("media_type", default=None)


def get_media_type() -> MediaType | None:
    """
    Get the media type negotiated for the current request.

    Returns:
        The negotiated ``MediaType``, or None outside a negotiated request.

    Example:
        ```python
        from FastNegotiation import get_media_type

        @app.get("/data")
        async def get_data():
            if get_media_type().subtype == "xml":
                return xml_response()
            return json_response()
        ```
    """
    return _media_type_ctx.get()


@dataclass(frozen=True)
class ContentNegotiationConfig(NegotiationConfig):
    """
    Configuration for content negotiation middleware.

    Attributes:
        add_vary_header: Add ``Accept`` to the response's Vary header.
    """

    add_vary_header: bool = False


class ContentNegotiationMiddleware(FastMVCMiddleware):
    """
    Middleware that negotiates the response media type.

    Compares the Accept header against the supported types and answers
    406 Not Acceptable when none fit. Otherwise the negotiated type is
    available as ``request.state.media_type`` and through
    ``get_media_type()`` while the request is handled.

    Example:
        ```python
        from FastNegotiation import ContentNegotiationMiddleware

        app.add_middleware(
            ContentNegotiationMiddleware,
            supported_types=["text/html", "application/json"],
            supply_default=True,
            add_content_type_header=True,
        )

        @app.get("/hello")
        async def hello(request):
            return PlainTextResponse(request.state.media_type.get_value())
        ```
    """

    def __init__(
        self,
        app,
        config: ContentNegotiationConfig | None = None,
        supported_types: list[str] | None = None,
        supply_default: bool | None = None,
        add_content_type_header: bool | None = None,
        exclude_paths: set[str] | None = None,
    ) -> None:
        super().__init__(app, exclude_paths=exclude_paths)

        if config is not None and not isinstance(config, ContentNegotiationConfig):
            raise NegotiationConfigError(
                f"Expected ContentNegotiationConfig, got {type(config).__name__}"
            )

        self.negotiator = Negotiator(
            supported_types=supported_types,
            supply_default=supply_default,
            add_content_type_header=add_content_type_header,
            config=config or ContentNegotiationConfig(),
        )
        self.config: ContentNegotiationConfig = self.negotiator.config
        self._logger = logging.getLogger(self.config.logger_name)

    def _add_vary(self, response: Response) -> None:
        vary = response.headers.get("Vary", "")
        fields = [v.strip().lower() for v in vary.split(",") if v.strip()]

        if "accept" in fields or "*" in fields:
            return

        response.headers["Vary"] = f"{vary}, Accept" if vary else "Accept"

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if self.should_skip(request):
            return await call_next(request)

        media_type = self.negotiator.negotiate(", ".join(request.headers.getlist("Accept")))

        if media_type is None:
            self._logger.info(f"Not acceptable: {request.method} {request.url.path}")
            return Response(status_code=406)

        token = _media_type_ctx.set(media_type)
        request.state.media_type = media_type

        try:
            response = await call_next(request)

            if self.config.add_content_type_header:
                response.headers["Content-Type"] = media_type.get_value()

            if self.config.add_vary_header:
                self._add_vary(response)

            return response
        finally:
            _media_type_ctx.reset(token)
