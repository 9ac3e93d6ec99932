"""
Application error types.

Models raise these; the app-level error handlers in app.py translate
them into the standard JSON error envelope:

    ValidationError -> 400   bad or missing input, nothing was written
    NotFoundError   -> 404   referenced room, booking or stay is gone
    ConflictError   -> 409   state or version no longer allows the write
    GatewayError    -> 500   storage failure, logged, generic message
"""


class ValidationError(ValueError):
    """Input failed validation before any write was attempted."""


class NotFoundError(LookupError):
    """A referenced record does not exist."""


class ConflictError(Exception):
    """The record changed state (or version) since it was read."""


class GatewayError(Exception):
    """The storage layer failed while executing an operation."""
