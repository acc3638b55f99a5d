"""
Exceptions for FastNegotiation.

Negotiation itself never raises: a request that cannot be satisfied is
answered with 406 Not Acceptable. These errors are only raised while a
middleware is being configured.
"""


class FastNegotiationError(Exception):
    """Base class for all FastNegotiation errors."""


class NegotiationConfigError(FastNegotiationError, ValueError):
    """
    Raised when a negotiation config cannot produce a usable middleware.

    Example:
        ```python
        from FastNegotiation import Negotiator, NegotiationConfigError

        try:
            Negotiator(supported_types=[], supply_default=True)
        except NegotiationConfigError as exc:
            print(exc)
        ```
    """
