"""
Accept header negotiation for FastNegotiation.

Picks the media type a handler should produce from the client's Accept
header and a server-declared list of supported types, answering 406 Not
Acceptable when nothing fits.
"""

import logging
from dataclasses import dataclass, field, replace

from FastNegotiation.exceptions import NegotiationConfigError
from FastNegotiation.media_type import MediaType, match
from FastNegotiation.messages import RequestHandler, Response, ServerRequest


MEDIA_TYPE_ATTRIBUTE = "mediaType"


def _normalize(media_type: str) -> str:
    """Lowercase a supported type, rejecting anything but a concrete ``type/subtype``."""
    normalized = media_type.strip().lower()
    type_, _, subtype = normalized.partition("/")

    if not type_ or not subtype or "/" in subtype or "*" in normalized or ";" in normalized:
        raise NegotiationConfigError(
            f"Supported type {media_type!r} is not a concrete type/subtype media type"
        )

    return normalized


@dataclass(frozen=True)
class NegotiationConfig:
    """
    Configuration for media type negotiation.

    Attributes:
        supported_types: Media types the server can produce, in priority order.
            The first entry is the default.
        supply_default: Use the first supported type when the request has
            no Accept header.
        add_content_type_header: Set the negotiated type as the response's
            Content-Type.
        logger_name: Logger name for negotiation records.

    Raises:
        NegotiationConfigError: If ``supply_default`` is set without any
            supported types, or a supported type is not a concrete
            ``type/subtype`` (wildcards and parameters are rejected).
            Supported types are stored lowercased.

    Example:
        ```python
        from FastNegotiation import NegotiationConfig

        config = NegotiationConfig(
            supported_types=["text/html", "application/json"],
            supply_default=True,
        )
        ```
    """

    supported_types: tuple[str, ...] = field(default_factory=tuple)
    supply_default: bool = False
    add_content_type_header: bool = False
    logger_name: str = "negotiation"

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "supported_types", tuple(_normalize(t) for t in self.supported_types)
        )

        if self.supply_default and not self.supported_types:
            raise NegotiationConfigError(
                "supply_default requires at least one supported type"
            )

    @property
    def default_type(self) -> str | None:
        """The type supplied when no Accept header is sent."""
        if not self.supported_types:
            return None
        return self.supported_types[0]


class Negotiator:
    """
    Pipeline unit that negotiates the response media type.

    Runs before the handler. When the Accept header (or, if enabled, the
    default) yields a supported type, the handler is called with a request
    carrying it as the ``mediaType`` attribute. Otherwise the pipeline is
    cut short with an empty 406 response and the handler never runs.

    The instance keeps no per-request state and can be shared by any
    number of concurrent requests.

    Example:
        ```python
        from FastNegotiation import CallableHandler, Negotiator, Response, ServerRequest

        negotiator = Negotiator(
            supported_types=["text/html", "application/json"],
            supply_default=True,
            add_content_type_header=True,
        )

        def show(request):
            media_type = request.get_attribute("mediaType")
            return Response(body=media_type.get_value().encode())

        request = ServerRequest("GET", "/hello", {"Accept": "application/json"})
        response = negotiator.process(request, CallableHandler(show))
        response.get_header_line("Content-Type")  # "application/json"
        ```
    """

    def __init__(
        self,
        supported_types: list[str] | None = None,
        supply_default: bool | None = None,
        add_content_type_header: bool | None = None,
        config: NegotiationConfig | None = None,
    ) -> None:
        config = config or NegotiationConfig()
        overrides = {}

        if supported_types is not None:
            overrides["supported_types"] = supported_types
        if supply_default is not None:
            overrides["supply_default"] = supply_default
        if add_content_type_header is not None:
            overrides["add_content_type_header"] = add_content_type_header

        self.config = replace(config, **overrides) if overrides else config
        self._logger = logging.getLogger(self.config.logger_name)

    def negotiate(self, accept_header: str | None) -> MediaType | None:
        """
        Negotiate a media type for an Accept header value.

        Args:
            accept_header: Raw Accept header; None or blank when not sent.

        Returns:
            The negotiated type, or None if the request is not acceptable.
        """
        accept_header = (accept_header or "").strip()

        if accept_header:
            media_type = match(accept_header, self.config.supported_types)
            if media_type is None:
                self._logger.debug(f"No supported type satisfies Accept: {accept_header}")
            return media_type

        if self.config.supply_default and self.config.default_type:
            self._logger.debug(f"No Accept header, defaulting to {self.config.default_type}")
            return MediaType(self.config.default_type)

        return None

    def process(self, request: ServerRequest, handler: RequestHandler) -> Response:
        """
        Negotiate for ``request`` and run ``handler`` if a type was found.

        Exceptions raised by the handler propagate unchanged.
        """
        media_type = self.negotiate(request.get_header_line("accept"))

        if media_type is None:
            self._logger.info(f"Not acceptable: {request.method} {request.path}")
            return Response(status_code=406)

        response = handler.handle(request.with_attribute(MEDIA_TYPE_ATTRIBUTE, media_type))

        if self.config.add_content_type_header:
            response = response.with_header("Content-Type", media_type.get_value())

        return response
