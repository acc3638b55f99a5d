"""
Media type matching for FastNegotiation.

Wraps werkzeug's ``MIMEAccept`` ranking behind a single ``match`` call so
the middleware only deals with the outcome of a negotiation, never with
the Accept header grammar.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from werkzeug.datastructures import MIMEAccept
from werkzeug.http import parse_accept_header


@dataclass(frozen=True)
class MediaType:
    """
    A negotiated media type.

    Attributes:
        value: Normalized ``type/subtype`` string, e.g. ``application/json``.
        quality: q-value of the client preference that selected it.
            Defaults supplied by the server carry ``1.0``.

    Example:
        ```python
        media_type = MediaType("application/json")
        media_type.get_value()  # "application/json"
        media_type.subtype      # "json"
        ```
    """

    value: str
    quality: float = 1.0

    def get_value(self) -> str:
        """Get the ``type/subtype`` string."""
        return self.value

    @property
    def type(self) -> str:
        return self.value.partition("/")[0]

    @property
    def subtype(self) -> str:
        return self.value.partition("/")[2]

    def __str__(self) -> str:
        return self.value


def _parse_accept(preference_header: str) -> MIMEAccept:
    """Parse an Accept header into werkzeug's ranked ``MIMEAccept``."""
    return parse_accept_header(preference_header, MIMEAccept)


def _wildcards(pattern: str) -> int:
    return pattern.partition(";")[0].count("*")


def match(preference_header: str, supported_types: Sequence[str]) -> MediaType | None:
    """
    Find the supported type that best satisfies an Accept header.

    Each supported type takes the q-value of the most specific pattern
    that matches it, so ``text/html;q=0, */*`` rejects ``text/html``.
    Candidates are ranked by that q-value, then by the specificity of the
    pattern (``text/html`` beats ``text/*`` beats ``*/*``). Among equally
    ranked candidates the one declared first in ``supported_types`` wins.
    Patterns that cannot be parsed match nothing.

    Args:
        preference_header: Raw Accept header value.
        supported_types: Server media types in priority order.

    Returns:
        The winning supported type, or None if no pattern matches.

    Example:
        ```python
        match("text/html;q=0.9,application/json;q=0.1", ["text/html", "application/json"])
        # MediaType(value="text/html", quality=0.9)
        ```
    """
    accept = _parse_accept(preference_header)
    best = None
    best_rank = None

    for position, supported in enumerate(supported_types):
        # MIMEAccept keeps patterns sorted most specific first.
        index = accept.find(supported)
        if index < 0:
            continue

        pattern, quality = accept[index]
        if quality <= 0:
            continue

        rank = (quality, -_wildcards(pattern), -position)
        if best_rank is None or rank > best_rank:
            best, best_rank = MediaType(supported, quality), rank

    return best
