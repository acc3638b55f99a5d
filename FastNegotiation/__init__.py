"""
FastNegotiation - Accept header media type negotiation for FastMVC.

Negotiates the media type a handler should produce from the client's
Accept header, either as a framework-neutral ``Negotiator`` pipeline unit
or as a Starlette/FastAPI middleware.
"""

from FastNegotiation.base import FastMVCMiddleware
from FastNegotiation.content_negotiation import (
    ContentNegotiationConfig,
    ContentNegotiationMiddleware,
    get_media_type,
)
from FastNegotiation.exceptions import FastNegotiationError, NegotiationConfigError
from FastNegotiation.media_type import MediaType, match
from FastNegotiation.messages import CallableHandler, RequestHandler, Response, ServerRequest
from FastNegotiation.negotiator import MEDIA_TYPE_ATTRIBUTE, NegotiationConfig, Negotiator


__version__ = "0.1.0"

__all__ = [
    "MEDIA_TYPE_ATTRIBUTE",
    "CallableHandler",
    "ContentNegotiationConfig",
    "ContentNegotiationMiddleware",
    "FastMVCMiddleware",
    "FastNegotiationError",
    "MediaType",
    "NegotiationConfig",
    "NegotiationConfigError",
    "Negotiator",
    "RequestHandler",
    "Response",
    "ServerRequest",
    "get_media_type",
    "match",
]
