#!/usr/bin/env python3
"""
Typed errors for the matching engine.

Callers receive either a result or one of these exceptions. The ``code``
attribute is stable and is what a serving layer maps to a status code.
"""

from typing import Optional


class MatchingError(Exception):
    """Base exception for matching engine errors."""
    code = "internal"


class NotFoundError(MatchingError):
    """Raised when a referenced candidate, posting or user is absent."""
    code = "not_found"


class InvalidArgumentError(MatchingError):
    """Raised for weights that do not sum to 1.0 or malformed criteria bounds."""
    code = "invalid_argument"


class PermissionDeniedError(MatchingError):
    """Raised when the caller may not change the matching weights."""
    code = "permission_denied"


class InternalError(MatchingError):
    """Wraps an unexpected retrieval or storage failure."""
    code = "internal"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class UnimplementedError(MatchingError):
    """Raised by analytics operations that have no backing data yet."""
    code = "unimplemented"


def wrap_error(exc: BaseException, context: str = "") -> MatchingError:
    """
    Return a typed matching error for ``exc``.

    Typed errors pass through unchanged; anything else becomes an
    InternalError that keeps the original exception as ``cause``.
    """
    if isinstance(exc, MatchingError):
        return exc
    message = f"{context}: {exc}" if context else str(exc)
    return InternalError(message, cause=exc)
